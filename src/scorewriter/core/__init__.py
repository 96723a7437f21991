"""
Core music primitives - the value layer.

These are the validated, immutable values everything else composes on:
- Pitch: MIDI note number (0-127) built from letter/accidental/octave
- Duration: Note lengths as exact fractions of a beat
- Dynamic: Velocity (0-127) from named levels or raw values
- Tempo: Beats per minute
- TimeSignature: Beats per bar over a note value
- Note, Chord, Rest: The event primitives a Phrase is built from
- ChordQuality, ScaleType, Scale: Helpers for building chords and runs
"""

from scorewriter.core.chord import Chord, ChordQuality
from scorewriter.core.dynamic import Dynamic, DynamicLevel
from scorewriter.core.note import Note, Rest
from scorewriter.core.pitch import Accidental, Interval, Letter, Pitch, PitchClass
from scorewriter.core.rhythm import Duration, Tempo, TimeSignature
from scorewriter.core.scale import Scale, ScaleType

__all__ = [
    # Pitch
    "Accidental",
    "Interval",
    "Letter",
    "Pitch",
    "PitchClass",
    # Rhythm
    "Duration",
    "Tempo",
    "TimeSignature",
    # Dynamic
    "Dynamic",
    "DynamicLevel",
    # Events
    "Chord",
    "ChordQuality",
    "Note",
    "Rest",
    # Scale
    "Scale",
    "ScaleType",
]
