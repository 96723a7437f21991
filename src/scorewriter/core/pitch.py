"""
Pitch primitives - PitchClass, Interval, Letter, Accidental, Pitch.

PitchClass represents the 12 chromatic pitches (octave-independent).
Interval represents the distance between pitches in semitones.
Pitch is a concrete MIDI note number (0-127), built either from a raw
number or from a letter, accidental and octave (C4 = 60).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from functools import total_ordering
from typing import ClassVar

from scorewriter.constants import MIDI_MAX, ErrorMessages
from scorewriter.errors import InvalidValue

# Display name mappings (module level to avoid IntEnum member issues)
_SHARP_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
_FLAT_NAMES: list[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

_PITCH_NAME_RE = re.compile(r"^([A-Ga-g])(bb|##|b|#|x)?(-?\d+)$")


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Octave-independent - C4 and C5 are both PitchClass.C.
    Enharmonic equivalents share the same value (C# == Db == 1).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else _SHARP_NAMES
        return names[self.value]

    @classmethod
    def from_midi(cls, midi_note: int) -> PitchClass:
        """Extract pitch class from MIDI note number."""
        return cls(midi_note % 12)


class Letter(IntEnum):
    """Natural note names, valued by their pitch class."""

    C = 0
    D = 2
    E = 4
    F = 5
    G = 7
    A = 9
    B = 11


class Accidental(IntEnum):
    """Accidentals, valued by their semitone alteration."""

    DOUBLE_FLAT = -2
    FLAT = -1
    NATURAL = 0
    SHARP = 1
    DOUBLE_SHARP = 2


_ACCIDENTAL_SYMBOLS: dict[str, Accidental] = {
    "": Accidental.NATURAL,
    "#": Accidental.SHARP,
    "b": Accidental.FLAT,
    "##": Accidental.DOUBLE_SHARP,
    "x": Accidental.DOUBLE_SHARP,
    "bb": Accidental.DOUBLE_FLAT,
}


@total_ordering
class Interval:
    """
    Distance between pitches in semitones.

    Scales are interval patterns and chords are interval stacks.

    Immutable and hashable.
    """

    __slots__ = ("_semitones",)
    _semitones: int

    UNISON: ClassVar[Interval]
    MINOR_SECOND: ClassVar[Interval]
    MAJOR_SECOND: ClassVar[Interval]
    MINOR_THIRD: ClassVar[Interval]
    MAJOR_THIRD: ClassVar[Interval]
    PERFECT_FOURTH: ClassVar[Interval]
    TRITONE: ClassVar[Interval]
    PERFECT_FIFTH: ClassVar[Interval]
    MINOR_SIXTH: ClassVar[Interval]
    MAJOR_SIXTH: ClassVar[Interval]
    MINOR_SEVENTH: ClassVar[Interval]
    MAJOR_SEVENTH: ClassVar[Interval]
    OCTAVE: ClassVar[Interval]

    def __init__(self, semitones: int) -> None:
        object.__setattr__(self, "_semitones", semitones)

    @property
    def semitones(self) -> int:
        """Number of semitones in this interval."""
        return self._semitones

    def __add__(self, other: Interval) -> Interval:
        if not isinstance(other, Interval):
            return NotImplemented
        return Interval(self._semitones + other._semitones)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return bool(self._semitones == other._semitones)

    def __lt__(self, other: Interval) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return bool(self._semitones < other._semitones)

    def __hash__(self) -> int:
        return hash(self._semitones)

    def __repr__(self) -> str:
        return f"Interval({self._semitones})"


Interval.UNISON = Interval(0)
Interval.MINOR_SECOND = Interval(1)
Interval.MAJOR_SECOND = Interval(2)
Interval.MINOR_THIRD = Interval(3)
Interval.MAJOR_THIRD = Interval(4)
Interval.PERFECT_FOURTH = Interval(5)
Interval.TRITONE = Interval(6)
Interval.PERFECT_FIFTH = Interval(7)
Interval.MINOR_SIXTH = Interval(8)
Interval.MAJOR_SIXTH = Interval(9)
Interval.MINOR_SEVENTH = Interval(10)
Interval.MAJOR_SEVENTH = Interval(11)
Interval.OCTAVE = Interval(12)


@dataclass(frozen=True, order=True)
class Pitch:
    """
    A concrete pitch as a MIDI note number (0-127).

    Octaves follow scientific pitch notation: C4 = 60, C-1 = 0, G9 = 127.
    Construction fails with InvalidValue when the number is out of range;
    the stored number is never clamped.

    Immutable, hashable and ordered by note number.
    """

    number: int

    def __post_init__(self) -> None:
        if isinstance(self.number, bool) or not isinstance(self.number, int):
            raise InvalidValue(ErrorMessages.INVALID_PITCH.format(value=self.number))
        if not 0 <= self.number <= MIDI_MAX:
            raise InvalidValue(ErrorMessages.INVALID_PITCH.format(value=self.number))

    @classmethod
    def from_name(
        cls,
        letter: Letter,
        accidental: Accidental = Accidental.NATURAL,
        octave: int = 4,
    ) -> Pitch:
        """
        Compute a pitch from its spelling.

        Args:
            letter: Natural note name
            accidental: Alteration applied to the letter
            octave: Octave number, where C4 = 60

        Returns:
            The Pitch

        Raises:
            InvalidValue: if the resulting number falls outside 0-127
                (e.g. Cb-1 or G#9)
        """
        return cls((octave + 1) * 12 + int(letter) + int(accidental))

    @classmethod
    def parse(cls, name: str) -> Pitch:
        """Parse a pitch from a string like 'C4', 'F#3', 'Bb2' or 'C-1'."""
        match = _PITCH_NAME_RE.match(name.strip())
        if not match:
            raise InvalidValue(ErrorMessages.INVALID_PITCH_NAME.format(name=name))
        letter_str, accidental_str, octave_str = match.groups()
        return cls.from_name(
            Letter[letter_str.upper()],
            _ACCIDENTAL_SYMBOLS[accidental_str or ""],
            int(octave_str),
        )

    @property
    def pitch_class(self) -> PitchClass:
        """The octave-independent pitch class."""
        return PitchClass.from_midi(self.number)

    @property
    def octave(self) -> int:
        """Octave number in scientific pitch notation."""
        return self.number // 12 - 1

    def transpose(self, semitones: int | Interval) -> Pitch:
        """Return the pitch shifted by a number of semitones (validated)."""
        if isinstance(semitones, Interval):
            semitones = semitones.semitones
        return Pitch(self.number + semitones)

    def spell(self, prefer_flats: bool = False) -> str:
        """Human-readable name with octave, e.g. 'C#4'."""
        return f"{self.pitch_class.spell(prefer_flats)}{self.octave}"

    def __int__(self) -> int:
        return self.number

    def __str__(self) -> str:
        return self.spell()

    def __repr__(self) -> str:
        return f"Pitch({self.number})"
