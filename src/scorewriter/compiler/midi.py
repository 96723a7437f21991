"""
MIDI export - the end of the pipeline.

Turns a Score into mido tracks and then into SMF bytes:

    Part timelines (beats) → note on/off events (ticks) → ordered, delta-timed
    MidiTracks → MidiFile → bytes

All operations are deterministic: same score → same bytes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from fractions import Fraction
from typing import TYPE_CHECKING

from mido import Message, MetaMessage, MidiFile, MidiTrack

from scorewriter.compiler import smf
from scorewriter.compiler.options import ExportOptions
from scorewriter.constants import (
    MAX_CHANNELS,
    MAX_TEMPO_MICROSECONDS,
    MAX_VLQ,
    MIDI_MAX,
    TICKS_PER_QUARTER,
    ErrorMessages,
)
from scorewriter.core.chord import Chord
from scorewriter.core.note import Note, Rest
from scorewriter.errors import EncodingError

if TYPE_CHECKING:
    from scorewriter.core.rhythm import Tempo
    from scorewriter.models.phrase import ResolvedEvent
    from scorewriter.models.score import Metadata, Score

logger = logging.getLogger(__name__)

# Multi-track, synchronous
SMF_FORMAT = 1


class EventKind(IntEnum):
    """Sub-event kinds, valued so that offs sort before ons at the same tick."""

    NOTE_OFF = 0
    NOTE_ON = 1


@dataclass(frozen=True)
class NoteEvent:
    """
    A single note-on or note-off at an absolute tick.

    `order` is the authoring index of the event it came from.
    """

    tick: int
    kind: EventKind
    pitch: int
    velocity: int
    order: int

    def sort_key(self) -> tuple[int, int, int]:
        return (self.tick, self.kind, self.order)


def beats_to_ticks(beats: Fraction | int, ticks_per_quarter: int = TICKS_PER_QUARTER) -> int:
    """
    Convert a beat position to ticks.

    Exact rational product, rounded half-to-even.
    """
    return round(Fraction(beats) * ticks_per_quarter)


def _check_data_byte(field: str, value: int) -> int:
    if not 0 <= value <= MIDI_MAX:
        raise EncodingError(ErrorMessages.DATA_BYTE_OUT_OF_RANGE.format(field=field, value=value))
    return value


def flatten(
    timeline: Sequence[ResolvedEvent],
    ticks_per_quarter: int = TICKS_PER_QUARTER,
) -> list[NoteEvent]:
    """
    Expand resolved events into note-on/note-off events.

    A Note gives one on/off pair, a Chord one pair per pitch, a Rest
    nothing. Output is in timeline order, not yet sorted by tick.
    """
    events: list[NoteEvent] = []
    for resolved in timeline:
        event = resolved.event
        if isinstance(event, Rest):
            continue
        if isinstance(event, Note):
            pitches = (event.pitch,)
        elif isinstance(event, Chord):
            pitches = event.pitches
        else:
            raise EncodingError(ErrorMessages.UNKNOWN_EVENT.format(kind=type(event).__name__))

        on_tick = beats_to_ticks(resolved.start, ticks_per_quarter)
        off_tick = beats_to_ticks(resolved.end, ticks_per_quarter)
        if off_tick <= on_tick:
            raise EncodingError(
                f"{event} at beat {resolved.start} is shorter than one tick "
                f"at {ticks_per_quarter} ticks per quarter."
            )
        velocity = _check_data_byte("Velocity", event.dynamic.velocity)
        for pitch in pitches:
            note = _check_data_byte("Pitch", pitch.number)
            events.append(NoteEvent(on_tick, EventKind.NOTE_ON, note, velocity, resolved.order))
            events.append(NoteEvent(off_tick, EventKind.NOTE_OFF, note, 0, resolved.order))
    return events


def order_events(events: Sequence[NoteEvent]) -> list[NoteEvent]:
    """
    Sort by tick; at equal ticks offs come before ons, then authoring order.

    The sort is stable, so the pitches of one chord keep ascending order.
    """
    return sorted(events, key=NoteEvent.sort_key)


def tempo_meta(tempo: Tempo) -> MetaMessage:
    """The set_tempo meta event: microseconds per quarter note."""
    tempo_us = tempo.microseconds_per_beat
    if tempo_us > MAX_TEMPO_MICROSECONDS:
        raise EncodingError(ErrorMessages.TEMPO_OUT_OF_RANGE.format(bpm=tempo.bpm))
    return MetaMessage("set_tempo", tempo=tempo_us, time=0)


def _track_name(name: str) -> MetaMessage:
    try:
        name.encode("latin-1")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Track name {name!r} is not representable in Latin-1.") from e
    return MetaMessage("track_name", name=name, time=0)


def metadata_messages(metadata: Metadata) -> list[MetaMessage]:
    """Time and key signature meta events for the first track."""
    time_sig = metadata.time_signature
    return [
        MetaMessage(
            "time_signature",
            numerator=time_sig.numerator,
            denominator=time_sig.denominator,
            clocks_per_click=24,
            notated_32nd_notes_per_beat=8,
            time=0,
        ),
        MetaMessage("key_signature", key=metadata.key_name, time=0),
    ]


def events_to_track(
    events: Sequence[NoteEvent],
    channel: int,
    program: int,
    leading: Sequence[MetaMessage] = (),
) -> MidiTrack:
    """
    Build one track: leading meta events, program change, notes, end of track.

    `events` must already be ordered; their absolute ticks become deltas.
    """
    track = MidiTrack()
    track.extend(leading)
    track.append(
        Message(
            "program_change",
            channel=channel,
            program=_check_data_byte("Program", program),
            time=0,
        )
    )

    current_tick = 0
    for event in events:
        delta = event.tick - current_tick
        if delta > MAX_VLQ:
            raise EncodingError(ErrorMessages.VLQ_OUT_OF_RANGE.format(value=delta))
        msg_type = "note_on" if event.kind is EventKind.NOTE_ON else "note_off"
        track.append(
            Message(
                msg_type,
                channel=channel,
                note=event.pitch,
                velocity=event.velocity,
                time=delta,
            )
        )
        current_tick = event.tick

    track.append(MetaMessage("end_of_track", time=0))
    return track


def check_part_count(score: Score) -> None:
    """A score needs at least one part and no more parts than channels."""
    count = len(score.parts)
    if not count:
        raise EncodingError(ErrorMessages.NO_PARTS.format(title=score.title))
    if count > MAX_CHANNELS:
        raise EncodingError(
            ErrorMessages.TOO_MANY_PARTS.format(count=count, maximum=MAX_CHANNELS)
        )


def score_to_midi(score: Score, options: ExportOptions | None = None) -> MidiFile:
    """
    Convert a Score to a mido MidiFile (format 1, one track per part).

    Part i plays on channel i.

    Track 0 carries the title, tempo and, when present, time/key signature.
    Every track carries its part name, its program change and its notes.

    Raises:
        EncodingError: if the score cannot be represented as a MIDI file
    """
    options = options or ExportOptions()
    check_part_count(score)
    parts = score.parts

    logger.debug(
        f"Encoding score '{score.title}': {len(parts)} parts at "
        f"{score.tempo.bpm} BPM, {options.ticks_per_quarter} ticks per quarter"
    )

    mid = MidiFile(type=SMF_FORMAT, ticks_per_beat=options.ticks_per_quarter)
    for index, part in enumerate(parts):
        leading: list[MetaMessage] = []
        if index == 0:
            if options.include_track_names and score.title:
                leading.append(_track_name(score.title))
            leading.append(tempo_meta(score.tempo))
            if score.metadata is not None:
                leading.extend(metadata_messages(score.metadata))
        if options.include_track_names and part.name and not (index == 0 and score.title):
            leading.append(_track_name(part.name))

        events = order_events(flatten(part.timeline(), options.ticks_per_quarter))
        track = events_to_track(
            events,
            channel=index,
            program=part.instrument.program,
            leading=leading,
        )
        logger.debug(f"  Track {index} ({part.instrument.display_name}): {len(events)} events")
        mid.tracks.append(track)

    return mid


def encode_score(score: Score, options: ExportOptions | None = None) -> bytes:
    """Encode a Score to the bytes of a Standard MIDI File."""
    data = smf.serialize(score_to_midi(score, options))
    logger.debug(f"Encoded score '{score.title}': {len(data)} bytes")
    return data
