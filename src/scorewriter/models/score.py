"""
Score - the top of the tree: title, tempo, metadata and parts.

The score schedules nothing itself. Parts own their phrases, phrases own
their events, and export() hands the whole tree to the MIDI encoder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Protocol

from scorewriter.compiler.midi import encode_score, score_to_midi
from scorewriter.compiler.options import ExportOptions
from scorewriter.compiler.score_ir import TimelineIR
from scorewriter.constants import ErrorMessages
from scorewriter.core.rhythm import Tempo, TimeSignature
from scorewriter.errors import InvalidValue, SinkError
from scorewriter.models.part import Part

if TYPE_CHECKING:
    from mido import MidiFile

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Key mode."""

    MAJOR = "major"
    MINOR = "minor"


# Key names by number of sharps (negative = flats), as spelled in key_signature meta events
_MAJOR_KEYS = ("Cb", "Gb", "Db", "Ab", "Eb", "Bb", "F", "C", "G", "D", "A", "E", "B", "F#", "C#")
_MINOR_KEYS = (
    "Abm", "Ebm", "Bbm", "Fm", "Cm", "Gm", "Dm",
    "Am", "Em", "Bm", "F#m", "C#m", "G#m", "D#m", "A#m",
)  # fmt: skip


@dataclass(frozen=True)
class Metadata:
    """
    Key and meter of a score.

    key_signature counts sharps (positive) or flats (negative), -7..7.
    """

    key_signature: int = 0
    mode: Mode = Mode.MAJOR
    time_signature: TimeSignature = field(default_factory=lambda: TimeSignature.COMMON_TIME)

    def __post_init__(self) -> None:
        if (
            isinstance(self.key_signature, bool)
            or not isinstance(self.key_signature, int)
            or not -7 <= self.key_signature <= 7
        ):
            raise InvalidValue(ErrorMessages.INVALID_KEY_SIGNATURE.format(value=self.key_signature))
        try:
            object.__setattr__(self, "mode", Mode(self.mode))
        except ValueError as e:
            raise InvalidValue(f"Unknown mode: {self.mode!r}") from e

    @property
    def key_name(self) -> str:
        """The key as a name like 'Eb' or 'F#m'."""
        keys = _MAJOR_KEYS if self.mode is Mode.MAJOR else _MINOR_KEYS
        return keys[self.key_signature + 7]


class Sink(Protocol):
    """Anything bytes can be written to: files, BytesIO, sockets wrapped as files."""

    def write(self, data: bytes, /) -> object: ...


class Score:
    """
    A complete piece: parts played together at one tempo.

    Example:
        score = Score("Demo", tempo=60)
        piano = Part(Instrument.ACOUSTIC_GRAND_PIANO)
        piano.add_phrase(phrase, 0)
        score.add_part(piano)
        with open("demo.mid", "wb") as f:
            score.export(f)
    """

    def __init__(
        self,
        title: str = "",
        tempo: Tempo | int = 120,
        metadata: Metadata | None = None,
    ) -> None:
        self.title = title
        self.tempo = tempo if isinstance(tempo, Tempo) else Tempo(tempo)
        self.metadata = metadata
        self._parts: list[Part] = []

    def set_tempo(self, tempo: Tempo | int) -> None:
        self.tempo = tempo if isinstance(tempo, Tempo) else Tempo(tempo)

    def add_part(self, part: Part) -> Part:
        """
        Add a copy of `part`; parts are encoded in insertion order.

        Returns the stored copy.
        """
        stored = part.copy()
        self._parts.append(stored)
        return stored

    @property
    def parts(self) -> tuple[Part, ...]:
        return tuple(self._parts)

    @property
    def length(self) -> Fraction:
        """The latest end beat over all parts."""
        return max((part.length for part in self._parts), default=Fraction(0))

    # -- output ------------------------------------------------------------

    def to_bytes(self, options: ExportOptions | None = None) -> bytes:
        """
        Encode the score as a Standard MIDI File.

        Raises:
            EncodingError: if the score cannot be represented as MIDI
        """
        return encode_score(self, options)

    def to_midi_file(self, options: ExportOptions | None = None) -> MidiFile:
        """The score as an in-memory mido MidiFile."""
        return score_to_midi(self, options)

    def export(self, sink: Sink | BinaryIO, options: ExportOptions | None = None) -> int:
        """
        Encode the score and write all of it to `sink`.

        The whole file is encoded before the first write, so nothing is
        written if encoding fails. A sink that reports a short count is
        written again with the remaining bytes. Returns the number of
        bytes written.

        Raises:
            EncodingError: if the score cannot be represented as MIDI
            SinkError: if the sink's write fails (the original exception is
                kept as `.original` and `__cause__`) or it accepts no bytes
        """
        data = self.to_bytes(options)
        total = len(data)
        written = 0
        while written < total:
            try:
                count = sink.write(data[written:])
            except Exception as e:
                logger.error(f"Failed to export score '{self.title}': {e}")
                raise SinkError(
                    ErrorMessages.SINK_WRITE_FAILED.format(error=e), original=e
                ) from e
            # None means the sink does not report a count
            if count is None:
                written = total
            elif count <= 0:
                message = ErrorMessages.SINK_STALLED.format(written=written, total=total)
                logger.error(f"Failed to export score '{self.title}': {message}")
                raise SinkError(message)
            else:
                written += count
        logger.debug(f"Exported score '{self.title}' ({total} bytes)")
        return total

    def write_midi_file(self, path: str | Path, options: ExportOptions | None = None) -> Path:
        """
        Export to a .mid file, creating parent directories as needed.

        Raises:
            EncodingError: if the score cannot be represented as MIDI
            SinkError: if the file cannot be written
        """
        path = Path(path)
        data = self.to_bytes(options)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write MIDI file {path}: {e}")
            raise SinkError(ErrorMessages.SINK_WRITE_FAILED.format(error=e), original=e) from e
        logger.info(f"Wrote {path} ({len(data)} bytes)")
        return path

    def timeline_ir(self, options: ExportOptions | None = None) -> TimelineIR:
        """The resolved timeline of every part, for inspection."""
        return TimelineIR.from_score(self, options)

    def __repr__(self) -> str:
        return f"Score({self.title!r}, tempo={self.tempo.bpm}, parts={len(self._parts)})"
