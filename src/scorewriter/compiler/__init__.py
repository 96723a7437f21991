"""
Encoding pipeline - transforms a scheduled score to MIDI.

The pipeline:
    Score (parts of placed phrases)
    → Part timelines (absolute beats)
    → note on/off events (ticks, ordered)
    → mido MidiFile
    → Standard MIDI File bytes
"""

from scorewriter.compiler.midi import (
    SMF_FORMAT,
    EventKind,
    NoteEvent,
    beats_to_ticks,
    encode_score,
    score_to_midi,
)
from scorewriter.compiler.options import ExportOptions
from scorewriter.compiler.score_ir import IRNote, IRTrack, TimelineIR
from scorewriter.compiler.smf import encode_vlq, serialize

__all__ = [
    # MIDI
    "SMF_FORMAT",
    "EventKind",
    "NoteEvent",
    "beats_to_ticks",
    "encode_score",
    "score_to_midi",
    # Bytes
    "encode_vlq",
    "serialize",
    # Options
    "ExportOptions",
    # IR
    "IRNote",
    "IRTrack",
    "TimelineIR",
]
