"""
Rhythm primitives - Duration, TimeSignature, Tempo.

Time primitives for representing rhythmic values.
Uses Fraction for exact subdivision representation: beat arithmetic
never goes through floating point, so long scores do not drift.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from numbers import Rational
from typing import ClassVar

from scorewriter.constants import MICROSECONDS_PER_MINUTE, ErrorMessages
from scorewriter.errors import InvalidValue

BeatsLike = int | Fraction | float | str


def to_beats(value: BeatsLike | Duration) -> Fraction:
    """
    Coerce a beat value to an exact Fraction.

    Floats are converted through their shortest decimal representation,
    so 0.1 becomes 1/10 rather than its binary approximation.

    Raises:
        InvalidValue: if the value is not a finite number
    """
    if isinstance(value, Duration):
        return value.beats
    if isinstance(value, bool):
        raise InvalidValue(ErrorMessages.INVALID_DURATION.format(value=value))
    if isinstance(value, Rational):
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidValue(ErrorMessages.INVALID_DURATION.format(value=value))
        return Fraction(repr(value))
    if isinstance(value, str):
        try:
            return Fraction(value.strip())
        except ValueError as e:
            raise InvalidValue(ErrorMessages.INVALID_DURATION.format(value=value)) from e
    raise InvalidValue(ErrorMessages.INVALID_DURATION.format(value=value))


@dataclass(frozen=True, order=True)
class Duration:
    """
    A rhythmic duration expressed in beats.

    A quarter note is 1 beat (Fraction(1)). Accepts ints, Fractions,
    decimal strings ("3/2") and finite floats; the stored value is
    always an exact Fraction and must be positive.

    Immutable and hashable.
    """

    beats: Fraction

    # Common durations (defined after class)
    BREVE: ClassVar[Duration]
    WHOLE: ClassVar[Duration]
    HALF: ClassVar[Duration]
    QUARTER: ClassVar[Duration]
    EIGHTH: ClassVar[Duration]
    SIXTEENTH: ClassVar[Duration]
    THIRTY_SECOND: ClassVar[Duration]

    # Dotted versions
    DOTTED_HALF: ClassVar[Duration]
    DOTTED_QUARTER: ClassVar[Duration]
    DOTTED_EIGHTH: ClassVar[Duration]
    DOTTED_SIXTEENTH: ClassVar[Duration]

    # Triplets
    HALF_TRIPLET: ClassVar[Duration]
    QUARTER_TRIPLET: ClassVar[Duration]
    EIGHTH_TRIPLET: ClassVar[Duration]
    SIXTEENTH_TRIPLET: ClassVar[Duration]

    def __post_init__(self) -> None:
        beats = to_beats(self.beats)
        if beats <= 0:
            raise InvalidValue(ErrorMessages.INVALID_DURATION.format(value=self.beats))
        object.__setattr__(self, "beats", beats)

    def dotted(self) -> Duration:
        """Return a dotted version (1.5x length)."""
        return Duration(self.beats * Fraction(3, 2))

    def double_dotted(self) -> Duration:
        """Return a double-dotted version (1.75x length)."""
        return Duration(self.beats * Fraction(7, 4))

    def triplet(self) -> Duration:
        """Return a triplet version (2/3 length)."""
        return Duration(self.beats * Fraction(2, 3))

    def tuplet(self, count: int, in_space_of: int) -> Duration:
        """
        Return a tuplet version: `count` notes in the space of `in_space_of`.

        Duration.EIGHTH.tuplet(5, 4) is a quintuplet eighth (2/5 beat).
        """
        if count <= 0 or in_space_of <= 0:
            raise InvalidValue(
                ErrorMessages.INVALID_DURATION.format(value=f"{count}:{in_space_of} tuplet")
            )
        return Duration(self.beats * Fraction(in_space_of, count))

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(self.beats + other.beats)

    def __mul__(self, n: int | Fraction) -> Duration:
        if isinstance(n, (int, Fraction)):
            return Duration(self.beats * n)
        return NotImplemented

    def __rmul__(self, n: int | Fraction) -> Duration:
        return self.__mul__(n)

    def __str__(self) -> str:
        name_map = {
            Fraction(8): "breve",
            Fraction(4): "whole",
            Fraction(2): "half",
            Fraction(1): "quarter",
            Fraction(1, 2): "eighth",
            Fraction(1, 4): "sixteenth",
            Fraction(1, 8): "32nd",
            Fraction(3): "dotted half",
            Fraction(3, 2): "dotted quarter",
            Fraction(3, 4): "dotted eighth",
            Fraction(3, 8): "dotted sixteenth",
            Fraction(2, 3): "quarter triplet",
            Fraction(1, 3): "eighth triplet",
            Fraction(1, 6): "sixteenth triplet",
        }
        if self.beats in name_map:
            return name_map[self.beats]
        return f"{self.beats} beats"

    def __repr__(self) -> str:
        return f"Duration(Fraction({self.beats.numerator}, {self.beats.denominator}))"


Duration.BREVE = Duration(Fraction(8))
Duration.WHOLE = Duration(Fraction(4))
Duration.HALF = Duration(Fraction(2))
Duration.QUARTER = Duration(Fraction(1))
Duration.EIGHTH = Duration(Fraction(1, 2))
Duration.SIXTEENTH = Duration(Fraction(1, 4))
Duration.THIRTY_SECOND = Duration(Fraction(1, 8))

Duration.DOTTED_HALF = Duration(Fraction(3))
Duration.DOTTED_QUARTER = Duration(Fraction(3, 2))
Duration.DOTTED_EIGHTH = Duration(Fraction(3, 4))
Duration.DOTTED_SIXTEENTH = Duration(Fraction(3, 8))

Duration.HALF_TRIPLET = Duration(Fraction(4, 3))
Duration.QUARTER_TRIPLET = Duration(Fraction(2, 3))
Duration.EIGHTH_TRIPLET = Duration(Fraction(1, 3))
Duration.SIXTEENTH_TRIPLET = Duration(Fraction(1, 6))


@dataclass(frozen=True)
class TimeSignature:
    """
    A time signature: beats per bar over a power-of-two note value.

    Examples:
        TimeSignature(4, 4) = common time
        TimeSignature(3, 4) = waltz
        TimeSignature(6, 8) = compound duple
    """

    numerator: int
    denominator: int

    COMMON_TIME: ClassVar[TimeSignature]  # 4/4
    CUT_TIME: ClassVar[TimeSignature]  # 2/2
    WALTZ: ClassVar[TimeSignature]  # 3/4
    SIX_EIGHT: ClassVar[TimeSignature]  # 6/8

    def __post_init__(self) -> None:
        for value in (self.numerator, self.denominator):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidValue(ErrorMessages.INVALID_TIME_SIGNATURE.format(value=self))
        if not 1 <= self.numerator <= 255:
            raise InvalidValue(ErrorMessages.INVALID_TIME_SIGNATURE.format(value=self))
        # The file format stores the denominator as a power of two
        if self.denominator <= 0 or self.denominator & (self.denominator - 1):
            raise InvalidValue(ErrorMessages.INVALID_TIME_SIGNATURE.format(value=self))

    @property
    def beat_unit(self) -> Duration:
        """The note value of one counted beat (quarter = 1 beat)."""
        return Duration(Fraction(4, self.denominator))

    @property
    def bar_duration(self) -> Duration:
        """Total duration of one bar, in quarter-note beats."""
        return Duration(self.beat_unit.beats * self.numerator)

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"

    def __repr__(self) -> str:
        return f"TimeSignature({self.numerator}, {self.denominator})"

    @classmethod
    def parse(cls, notation: str) -> TimeSignature:
        """Parse a time signature from notation like '4/4', '3/4', '6/8'."""
        parts = notation.split("/")
        if len(parts) != 2:
            raise InvalidValue(ErrorMessages.INVALID_TIME_SIGNATURE.format(value=notation))
        try:
            numerator, denominator = int(parts[0]), int(parts[1])
        except ValueError as e:
            raise InvalidValue(ErrorMessages.INVALID_TIME_SIGNATURE.format(value=notation)) from e
        return cls(numerator, denominator)


TimeSignature.COMMON_TIME = TimeSignature(4, 4)
TimeSignature.CUT_TIME = TimeSignature(2, 2)
TimeSignature.WALTZ = TimeSignature(3, 4)
TimeSignature.SIX_EIGHT = TimeSignature(6, 8)


@dataclass(frozen=True)
class Tempo:
    """
    Tempo in beats (quarter notes) per minute.

    Must be a positive integer. Tempo(60) plays one beat per second.
    """

    bpm: int

    def __post_init__(self) -> None:
        if isinstance(self.bpm, bool) or not isinstance(self.bpm, int) or self.bpm <= 0:
            raise InvalidValue(ErrorMessages.INVALID_TEMPO.format(value=self.bpm))

    @property
    def microseconds_per_beat(self) -> int:
        """Length of one beat in microseconds (the tempo meta-event value)."""
        return MICROSECONDS_PER_MINUTE // self.bpm

    def __str__(self) -> str:
        return f"{self.bpm} BPM"
