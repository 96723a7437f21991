"""
Scale primitives - ScaleType and Scale.

Scales are interval patterns from a tonic. A Scale generates concrete
pitches, continuing through octaves, for building phrases quickly.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

from scorewriter.constants import MIDI_MAX
from scorewriter.core.note import as_pitch
from scorewriter.core.pitch import Interval, Pitch
from scorewriter.errors import InvalidValue


@dataclass(frozen=True)
class ScaleType:
    """
    A scale defined by its interval pattern.

    The intervals are from one degree to the next (not cumulative).
    A major scale is: W W H W W W H (2 2 1 2 2 2 1 semitones)

    Immutable and hashable.
    """

    intervals: tuple[Interval, ...]
    name: str = ""

    MAJOR: ClassVar[ScaleType]
    NATURAL_MINOR: ClassVar[ScaleType]
    HARMONIC_MINOR: ClassVar[ScaleType]
    MELODIC_MINOR: ClassVar[ScaleType]
    DORIAN: ClassVar[ScaleType]
    PHRYGIAN: ClassVar[ScaleType]
    LYDIAN: ClassVar[ScaleType]
    MIXOLYDIAN: ClassVar[ScaleType]
    LOCRIAN: ClassVar[ScaleType]

    def __post_init__(self) -> None:
        total = sum(i.semitones for i in self.intervals)
        if total != 12:
            raise InvalidValue(f"Scale intervals must sum to 12 semitones, got {total}")

    def offsets(self) -> list[int]:
        """Semitones from the tonic to each degree, tonic (0) first, octave excluded."""
        offsets = [0]
        for interval in self.intervals[:-1]:
            offsets.append(offsets[-1] + interval.semitones)
        return offsets

    def __str__(self) -> str:
        return self.name or f"ScaleType({self.intervals})"


_M2 = Interval(2)  # whole step
_m2 = Interval(1)  # half step
_A2 = Interval(3)  # augmented second

ScaleType.MAJOR = ScaleType((_M2, _M2, _m2, _M2, _M2, _M2, _m2), "major")
ScaleType.NATURAL_MINOR = ScaleType((_M2, _m2, _M2, _M2, _m2, _M2, _M2), "natural minor")
ScaleType.HARMONIC_MINOR = ScaleType((_M2, _m2, _M2, _M2, _m2, _A2, _m2), "harmonic minor")
ScaleType.MELODIC_MINOR = ScaleType((_M2, _m2, _M2, _M2, _M2, _M2, _m2), "melodic minor")
ScaleType.DORIAN = ScaleType((_M2, _m2, _M2, _M2, _M2, _m2, _M2), "dorian")
ScaleType.PHRYGIAN = ScaleType((_m2, _M2, _M2, _M2, _m2, _M2, _M2), "phrygian")
ScaleType.LYDIAN = ScaleType((_M2, _M2, _M2, _m2, _M2, _M2, _m2), "lydian")
ScaleType.MIXOLYDIAN = ScaleType((_M2, _M2, _m2, _M2, _M2, _m2, _M2), "mixolydian")
ScaleType.LOCRIAN = ScaleType((_m2, _M2, _M2, _m2, _M2, _M2, _M2), "locrian")


@dataclass(frozen=True)
class Scale:
    """
    A scale type rooted on a concrete tonic pitch.

    Examples:
        Scale("C4", ScaleType.MAJOR).pitches()      # C4 D4 ... B4 C5
        Scale("C4", ScaleType.NATURAL_MINOR).n_pitches(15)
    """

    tonic: Pitch
    scale_type: ScaleType

    def __post_init__(self) -> None:
        object.__setattr__(self, "tonic", as_pitch(self.tonic))

    def pitches(self) -> list[Pitch]:
        """One octave of the scale, from the tonic up to and including the upper tonic."""
        return list(self.iter_pitches(len(self.scale_type.intervals) + 1))

    def n_pitches(self, count: int) -> list[Pitch]:
        """
        The first `count` pitches of the scale, continuing into higher octaves.

        Stops early, without error, once the next pitch would exceed 127.
        """
        return list(self.iter_pitches(count))

    def iter_pitches(self, count: int) -> Iterator[Pitch]:
        """Lazily generate up to `count` ascending scale pitches."""
        offsets = self.scale_type.offsets()
        for index in range(count):
            octave, degree = divmod(index, len(offsets))
            number = self.tonic.number + octave * 12 + offsets[degree]
            if number > MIDI_MAX:
                return
            yield Pitch(number)
