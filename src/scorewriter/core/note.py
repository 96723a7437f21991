"""
Event primitives - Note and Rest.

A Note sounds one pitch for a duration at a dynamic.
A Rest occupies time and emits nothing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scorewriter.core.dynamic import Dynamic, DynamicLevel
from scorewriter.core.pitch import Pitch
from scorewriter.core.rhythm import BeatsLike, Duration


def as_pitch(value: Pitch | int | str) -> Pitch:
    """Accept a Pitch, a MIDI number or a name like 'C4'."""
    if isinstance(value, Pitch):
        return value
    if isinstance(value, str):
        return Pitch.parse(value)
    return Pitch(value)


def as_duration(value: Duration | BeatsLike) -> Duration:
    """Accept a Duration or anything Duration() accepts."""
    return value if isinstance(value, Duration) else Duration(value)


def as_dynamic(value: Dynamic | DynamicLevel | int | str) -> Dynamic:
    """Accept a Dynamic, a DynamicLevel, a raw velocity or a level name."""
    if isinstance(value, Dynamic):
        return value
    if isinstance(value, (DynamicLevel, str)):
        return Dynamic.from_level(value)
    return Dynamic(value)


@dataclass(frozen=True)
class Note:
    """
    A single sounding pitch.

    Fields accept their value types or plain values:
        Note(Pitch.parse("C4"), Duration.QUARTER, Dynamic.MF)
        Note("C4", 1, "mf")
    """

    pitch: Pitch
    duration: Duration
    dynamic: Dynamic = Dynamic.MF

    def __post_init__(self) -> None:
        object.__setattr__(self, "pitch", as_pitch(self.pitch))
        object.__setattr__(self, "duration", as_duration(self.duration))
        object.__setattr__(self, "dynamic", as_dynamic(self.dynamic))

    @classmethod
    def sequence(
        cls,
        pitches: Iterable[Pitch | int | str],
        duration: Duration | BeatsLike,
        dynamic: Dynamic | DynamicLevel | int | str = Dynamic.MF,
    ) -> list[Note]:
        """One note per pitch, all sharing a duration and dynamic."""
        return [cls(pitch, duration, dynamic) for pitch in pitches]

    def __str__(self) -> str:
        return f"{self.pitch} {self.duration} {self.dynamic}"


@dataclass(frozen=True)
class Rest:
    """Silence for a duration."""

    duration: Duration

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration", as_duration(self.duration))

    def __str__(self) -> str:
        return f"rest {self.duration}"
