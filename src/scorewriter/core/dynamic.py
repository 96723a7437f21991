"""
Dynamic primitive - note loudness as a MIDI velocity.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from scorewriter.constants import MIDI_MAX, ErrorMessages
from scorewriter.errors import InvalidValue


class DynamicLevel(IntEnum):
    """Named dynamic markings and their velocities."""

    SILENT = 0
    PPP = 10  # pianississimo
    PP = 25  # pianissimo
    P = 50  # piano
    MP = 60  # mezzo-piano
    MF = 70  # mezzo-forte
    F = 85  # forte
    FF = 100  # fortissimo
    FFF = 120  # fortississimo


@dataclass(frozen=True, order=True)
class Dynamic:
    """
    A velocity in [0, 127].

    Build from a named level (Dynamic.MF, Dynamic.from_level(DynamicLevel.P))
    or from a raw value. Out-of-range values are rejected, never clamped.
    """

    velocity: int

    SILENT: ClassVar[Dynamic]
    PPP: ClassVar[Dynamic]
    PP: ClassVar[Dynamic]
    P: ClassVar[Dynamic]
    MP: ClassVar[Dynamic]
    MF: ClassVar[Dynamic]
    F: ClassVar[Dynamic]
    FF: ClassVar[Dynamic]
    FFF: ClassVar[Dynamic]

    def __post_init__(self) -> None:
        if isinstance(self.velocity, bool) or not isinstance(self.velocity, int):
            raise InvalidValue(ErrorMessages.INVALID_DYNAMIC.format(value=self.velocity))
        if not 0 <= self.velocity <= MIDI_MAX:
            raise InvalidValue(ErrorMessages.INVALID_DYNAMIC.format(value=self.velocity))
        # Store named levels as plain ints so equality and repr stay simple
        object.__setattr__(self, "velocity", int(self.velocity))

    @classmethod
    def from_level(cls, level: DynamicLevel | str) -> Dynamic:
        """Create from a DynamicLevel or its name ('mf', 'FF')."""
        if isinstance(level, str):
            try:
                level = DynamicLevel[level.strip().upper()]
            except KeyError as e:
                raise InvalidValue(ErrorMessages.INVALID_DYNAMIC.format(value=level)) from e
        return cls(int(level))

    @property
    def level(self) -> DynamicLevel | None:
        """The named level with exactly this velocity, if any."""
        try:
            return DynamicLevel(self.velocity)
        except ValueError:
            return None

    def __int__(self) -> int:
        return self.velocity

    def __str__(self) -> str:
        level = self.level
        return level.name.lower() if level is not None else str(self.velocity)


Dynamic.SILENT = Dynamic(DynamicLevel.SILENT)
Dynamic.PPP = Dynamic(DynamicLevel.PPP)
Dynamic.PP = Dynamic(DynamicLevel.PP)
Dynamic.P = Dynamic(DynamicLevel.P)
Dynamic.MP = Dynamic(DynamicLevel.MP)
Dynamic.MF = Dynamic(DynamicLevel.MF)
Dynamic.F = Dynamic(DynamicLevel.F)
Dynamic.FF = Dynamic(DynamicLevel.FF)
Dynamic.FFF = Dynamic(DynamicLevel.FFF)
