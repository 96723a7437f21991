"""
Timeline IR - an inspectable view of a score between scheduling and encoding.

Every sounding pitch of every part, resolved to absolute ticks on its
track's channel. The IR is versioned and designed to be:
- Deterministic: same score → same IR
- Serializable: JSON/YAML for inspection and golden-file testing
- Diffable: canonical ordering for meaningful diffs

The IR is a read-only view; the MIDI bytes are always encoded from the
Score itself.

Schema version: timeline_ir/v1
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from scorewriter.compiler.midi import check_part_count, flatten
from scorewriter.compiler.options import ExportOptions
from scorewriter.constants import MAX_CHANNELS, MIDI_MAX, TICKS_PER_QUARTER

if TYPE_CHECKING:
    from scorewriter.models.score import Score

# Current schema version
SCHEMA_VERSION = "timeline_ir/v1"


@dataclass(frozen=True, order=True)
class IRNote:
    """
    A single sounding pitch in the IR.

    Ordered by: (start_ticks, channel, pitch) for deterministic sorting.
    """

    start_ticks: int  # Absolute position in ticks
    channel: int  # MIDI channel (0-15), one per part
    pitch: int  # MIDI note number (0-127)
    duration_ticks: int
    velocity: int  # 0-127

    # Display only: the start in beats
    beat: float | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        """Validate MIDI ranges."""
        if not 0 <= self.pitch <= MIDI_MAX:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")
        if not 0 <= self.velocity <= MIDI_MAX:
            raise ValueError(f"Velocity must be 0-127, got {self.velocity}")
        if not 0 <= self.channel < MAX_CHANNELS:
            raise ValueError(f"Channel must be 0-15, got {self.channel}")
        if self.start_ticks < 0:
            raise ValueError(f"Start ticks must be >= 0, got {self.start_ticks}")
        if self.duration_ticks < 0:
            raise ValueError(f"Duration ticks must be >= 0, got {self.duration_ticks}")

    @property
    def end_ticks(self) -> int:
        return self.start_ticks + self.duration_ticks

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {
            "start_ticks": self.start_ticks,
            "channel": self.channel,
            "pitch": self.pitch,
            "duration_ticks": self.duration_ticks,
            "velocity": self.velocity,
        }
        if self.beat is not None:
            d["beat"] = self.beat
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IRNote:
        """Create from dictionary."""
        return cls(
            start_ticks=d["start_ticks"],
            channel=d["channel"],
            pitch=d["pitch"],
            duration_ticks=d["duration_ticks"],
            velocity=d["velocity"],
            beat=d.get("beat"),
        )


@dataclass(frozen=True)
class IRTrack:
    """One part as it will appear in the file."""

    channel: int
    program: int
    instrument: str
    name: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IRTrack:
        """Create from dictionary."""
        return cls(**d)


@dataclass
class TimelineIR:
    """
    The resolved timeline of a whole score.

    Useful for:
    - Inspection: human-readable when serialized
    - Testing: golden-file tests can compare the IR directly
    - Diffing: see which notes moved between two versions of a score
    """

    # Schema version for forward compatibility
    schema: str = SCHEMA_VERSION

    title: str = ""
    tempo: int = 120
    key: str = ""
    time_signature: str = ""
    ticks_per_beat: int = TICKS_PER_QUARTER

    # Latest note-off over all tracks
    total_ticks: int = 0

    tracks: list[IRTrack] = field(default_factory=list)
    notes: list[IRNote] = field(default_factory=list)

    @classmethod
    def from_score(cls, score: Score, options: ExportOptions | None = None) -> TimelineIR:
        """
        Resolve every part of a score to ticks.

        Notes come from the same flattening the MIDI encoder uses, so a
        score the encoder rejects is rejected here with the same
        EncodingError. Rests produce no notes; a chord produces one note
        per pitch.
        """
        options = options or ExportOptions()
        tpq = options.ticks_per_quarter
        check_part_count(score)
        metadata = score.metadata

        ir = cls(
            title=score.title,
            tempo=score.tempo.bpm,
            key=metadata.key_name if metadata is not None else "",
            time_signature=str(metadata.time_signature) if metadata is not None else "",
            ticks_per_beat=tpq,
        )
        for channel, part in enumerate(score.parts):
            ir.tracks.append(
                IRTrack(
                    channel=channel,
                    program=part.instrument.program,
                    instrument=part.instrument.display_name,
                    name=part.name,
                )
            )
            for resolved in part.timeline():
                events = flatten([resolved], tpq)
                # flatten emits each pitch as an on/off pair
                for on, off in zip(events[::2], events[1::2], strict=True):
                    ir.notes.append(
                        IRNote(
                            start_ticks=on.tick,
                            channel=channel,
                            pitch=on.pitch,
                            duration_ticks=off.tick - on.tick,
                            velocity=on.velocity,
                            beat=float(resolved.start),
                        )
                    )
                    ir.total_ticks = max(ir.total_ticks, off.tick)
        return ir.canonicalize()

    def canonicalize(self) -> TimelineIR:
        """
        Return a new TimelineIR with canonical ordering.

        Notes are sorted by (start_ticks, channel, pitch); tracks by channel.
        """
        return TimelineIR(
            schema=self.schema,
            title=self.title,
            tempo=self.tempo,
            key=self.key,
            time_signature=self.time_signature,
            ticks_per_beat=self.ticks_per_beat,
            total_ticks=self.total_ticks,
            tracks=sorted(self.tracks, key=lambda t: t.channel),
            notes=sorted(self.notes),  # IRNote has __lt__ via order=True
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a dictionary for JSON/YAML serialization.

        The output is always canonicalized for deterministic diffs.
        """
        ir = self.canonicalize()
        return {
            "schema": ir.schema,
            "title": ir.title,
            "tempo": ir.tempo,
            "key": ir.key,
            "time_signature": ir.time_signature,
            "ticks_per_beat": ir.ticks_per_beat,
            "total_ticks": ir.total_ticks,
            "tracks": [t.to_dict() for t in ir.tracks],
            "notes": [n.to_dict() for n in ir.notes],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        """Serialize to YAML string (keys in schema order)."""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TimelineIR:
        """Create from dictionary."""
        return cls(
            schema=d.get("schema", SCHEMA_VERSION),
            title=d.get("title", ""),
            tempo=d.get("tempo", 120),
            key=d.get("key", ""),
            time_signature=d.get("time_signature", ""),
            ticks_per_beat=d.get("ticks_per_beat", TICKS_PER_QUARTER),
            total_ticks=d.get("total_ticks", 0),
            tracks=[IRTrack.from_dict(t) for t in d.get("tracks", [])],
            notes=[IRNote.from_dict(n) for n in d.get("notes", [])],
        )

    @classmethod
    def from_json(cls, json_str: str) -> TimelineIR:
        """Deserialize from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_yaml(cls, yaml_str: str) -> TimelineIR:
        """Deserialize from YAML string."""
        return cls.from_dict(yaml.safe_load(yaml_str))

    def note_count(self) -> int:
        """Total number of sounding pitches."""
        return len(self.notes)

    def notes_by_channel(self) -> dict[int, list[IRNote]]:
        """Group notes by channel (one channel per part)."""
        result: dict[int, list[IRNote]] = {}
        for note in self.notes:
            result.setdefault(note.channel, []).append(note)
        return result

    def summary(self) -> dict[str, Any]:
        """Generate a summary for quick inspection."""
        by_channel = self.notes_by_channel()
        return {
            "title": self.title,
            "tempo": self.tempo,
            "total_ticks": self.total_ticks,
            "total_notes": self.note_count(),
            "tracks": {
                track.name or track.instrument: len(by_channel.get(track.channel, []))
                for track in self.tracks
            },
            "pitch_range": (
                min(n.pitch for n in self.notes) if self.notes else 0,
                max(n.pitch for n in self.notes) if self.notes else 0,
            ),
            "velocity_range": (
                min(n.velocity for n in self.notes) if self.notes else 0,
                max(n.velocity for n in self.notes) if self.notes else 0,
            ),
        }

    def diff_summary(self, other: TimelineIR) -> dict[str, Any]:
        """
        Generate a summary of differences between two IRs.

        Useful for understanding what changed between two versions of a score.
        """
        self_notes = set(self.notes)
        other_notes = set(other.notes)

        return {
            "notes_added": len(other_notes - self_notes),
            "notes_removed": len(self_notes - other_notes),
            "notes_unchanged": len(self_notes & other_notes),
            "tempo_changed": self.tempo != other.tempo,
            "key_changed": self.key != other.key,
            "length_changed": self.total_ticks != other.total_ticks,
        }
