"""
Chord primitives - ChordQuality and Chord.

Chord qualities are interval stacks measured from the root.
A Chord event is a set of distinct pitches sounding together with one
duration and one dynamic.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar

from scorewriter.constants import ErrorMessages
from scorewriter.core.dynamic import Dynamic, DynamicLevel
from scorewriter.core.note import as_duration, as_dynamic, as_pitch
from scorewriter.core.pitch import Interval, Pitch
from scorewriter.core.rhythm import BeatsLike, Duration
from scorewriter.errors import InvalidValue


@dataclass(frozen=True)
class ChordQuality:
    """
    A chord quality defined by its intervals from the root.

    Intervals are measured from the root, not stacked.
    For example, a major triad is root + M3 + P5 (0, 4, 7 semitones).

    Immutable and hashable.
    """

    intervals: frozenset[Interval]
    name: str = ""

    MAJOR: ClassVar[ChordQuality]
    MINOR: ClassVar[ChordQuality]
    DIMINISHED: ClassVar[ChordQuality]
    AUGMENTED: ClassVar[ChordQuality]
    MAJOR_7: ClassVar[ChordQuality]
    MINOR_7: ClassVar[ChordQuality]
    DOMINANT_7: ClassVar[ChordQuality]
    DIMINISHED_7: ClassVar[ChordQuality]
    HALF_DIMINISHED_7: ClassVar[ChordQuality]
    SUS2: ClassVar[ChordQuality]
    SUS4: ClassVar[ChordQuality]

    def get_pitches(self, root: Pitch) -> list[Pitch]:
        """
        Get the concrete pitches of this quality above a root.

        Raises:
            InvalidValue: if any chord tone would exceed pitch 127
        """
        sorted_intervals = sorted(self.intervals)
        return [root.transpose(interval) for interval in sorted_intervals]

    def __str__(self) -> str:
        return self.name or f"ChordQuality({self.intervals})"


ChordQuality.MAJOR = ChordQuality(
    frozenset({Interval.UNISON, Interval.MAJOR_THIRD, Interval.PERFECT_FIFTH}), "major"
)
ChordQuality.MINOR = ChordQuality(
    frozenset({Interval.UNISON, Interval.MINOR_THIRD, Interval.PERFECT_FIFTH}), "minor"
)
ChordQuality.DIMINISHED = ChordQuality(
    frozenset({Interval.UNISON, Interval.MINOR_THIRD, Interval.TRITONE}), "diminished"
)
ChordQuality.AUGMENTED = ChordQuality(
    frozenset({Interval.UNISON, Interval.MAJOR_THIRD, Interval.MINOR_SIXTH}), "augmented"
)
ChordQuality.MAJOR_7 = ChordQuality(
    frozenset(
        {Interval.UNISON, Interval.MAJOR_THIRD, Interval.PERFECT_FIFTH, Interval.MAJOR_SEVENTH}
    ),
    "major 7",
)
ChordQuality.MINOR_7 = ChordQuality(
    frozenset(
        {Interval.UNISON, Interval.MINOR_THIRD, Interval.PERFECT_FIFTH, Interval.MINOR_SEVENTH}
    ),
    "minor 7",
)
ChordQuality.DOMINANT_7 = ChordQuality(
    frozenset(
        {Interval.UNISON, Interval.MAJOR_THIRD, Interval.PERFECT_FIFTH, Interval.MINOR_SEVENTH}
    ),
    "dominant 7",
)
ChordQuality.DIMINISHED_7 = ChordQuality(
    frozenset({Interval.UNISON, Interval.MINOR_THIRD, Interval.TRITONE, Interval.MAJOR_SIXTH}),
    "diminished 7",
)
ChordQuality.HALF_DIMINISHED_7 = ChordQuality(
    frozenset({Interval.UNISON, Interval.MINOR_THIRD, Interval.TRITONE, Interval.MINOR_SEVENTH}),
    "half-diminished 7",
)
ChordQuality.SUS2 = ChordQuality(
    frozenset({Interval.UNISON, Interval.MAJOR_SECOND, Interval.PERFECT_FIFTH}), "sus2"
)
ChordQuality.SUS4 = ChordQuality(
    frozenset({Interval.UNISON, Interval.PERFECT_FOURTH, Interval.PERFECT_FIFTH}), "sus4"
)


@dataclass(frozen=True)
class Chord:
    """
    Pitches that start together and share one duration and dynamic.

    At least one pitch, no duplicates. Pitches are stored in ascending
    order, which is also the order their events are emitted in.
    """

    pitches: tuple[Pitch, ...]
    duration: Duration
    dynamic: Dynamic = Dynamic.MF

    def __post_init__(self) -> None:
        pitches = tuple(as_pitch(p) for p in self.pitches)
        if not pitches:
            raise InvalidValue(ErrorMessages.EMPTY_CHORD)
        seen: set[Pitch] = set()
        for pitch in pitches:
            if pitch in seen:
                raise InvalidValue(ErrorMessages.DUPLICATE_CHORD_PITCH.format(pitch=pitch))
            seen.add(pitch)
        object.__setattr__(self, "pitches", tuple(sorted(pitches)))
        object.__setattr__(self, "duration", as_duration(self.duration))
        object.__setattr__(self, "dynamic", as_dynamic(self.dynamic))

    @classmethod
    def from_quality(
        cls,
        root: Pitch | int | str,
        quality: ChordQuality,
        duration: Duration | BeatsLike,
        dynamic: Dynamic | DynamicLevel | int | str = Dynamic.MF,
    ) -> Chord:
        """
        Build a chord from a root pitch and a quality.

        Example:
            Chord.from_quality("C4", ChordQuality.MAJOR, Duration.HALF)
            # C4 E4 G4
        """
        return cls(tuple(quality.get_pitches(as_pitch(root))), duration, dynamic)

    @classmethod
    def of(
        cls,
        pitches: Iterable[Pitch | int | str],
        duration: Duration | BeatsLike,
        dynamic: Dynamic | DynamicLevel | int | str = Dynamic.MF,
    ) -> Chord:
        """Build a chord from any iterable of pitches."""
        return cls(tuple(pitches), duration, dynamic)

    def __len__(self) -> int:
        return len(self.pitches)

    def __str__(self) -> str:
        names = " ".join(str(p) for p in self.pitches)
        return f"[{names}] {self.duration} {self.dynamic}"
