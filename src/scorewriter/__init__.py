"""
scorewriter - compose scores in Python and write them as Standard MIDI Files.

    from scorewriter import Duration, Dynamic, Instrument, Note, Part, Phrase, Score

    phrase = Phrase.from_events(Note.sequence(["C4", "E4", "G4"], Duration.QUARTER, Dynamic.F))
    piano = Part(Instrument.ACOUSTIC_GRAND_PIANO)
    piano.add_phrase(phrase, 0)

    score = Score("Arpeggio", tempo=60)
    score.add_part(piano)
    score.write_midi_file("arpeggio.mid")
"""

from scorewriter.compiler import ExportOptions, TimelineIR
from scorewriter.constants import TICKS_PER_QUARTER, Instrument
from scorewriter.core import (
    Accidental,
    Chord,
    ChordQuality,
    Duration,
    Dynamic,
    DynamicLevel,
    Interval,
    Letter,
    Note,
    Pitch,
    PitchClass,
    Rest,
    Scale,
    ScaleType,
    Tempo,
    TimeSignature,
)
from scorewriter.errors import (
    EncodingError,
    InvalidPlacement,
    InvalidValue,
    ScoreWriterError,
    SinkError,
)
from scorewriter.models import Metadata, Mode, Part, Phrase, Placement, Score

__version__ = "0.1.0"

__all__ = [
    # Values
    "Accidental",
    "Chord",
    "ChordQuality",
    "Duration",
    "Dynamic",
    "DynamicLevel",
    "Instrument",
    "Interval",
    "Letter",
    "Note",
    "Pitch",
    "PitchClass",
    "Rest",
    "Scale",
    "ScaleType",
    "Tempo",
    "TimeSignature",
    # Structure
    "Metadata",
    "Mode",
    "Part",
    "Phrase",
    "Placement",
    "Score",
    # Output
    "ExportOptions",
    "TICKS_PER_QUARTER",
    "TimelineIR",
    # Errors
    "EncodingError",
    "InvalidPlacement",
    "InvalidValue",
    "ScoreWriterError",
    "SinkError",
]
