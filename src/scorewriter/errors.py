"""
Exception hierarchy.

Every failure is raised at the call that introduced the bad value:
constructors raise InvalidValue, phrase/part placement raises
InvalidPlacement, serialization raises EncodingError and a failing
destination raises SinkError. Nothing is clamped or retried.
"""

from __future__ import annotations


class ScoreWriterError(Exception):
    """Base class for all scorewriter errors."""


class InvalidValue(ScoreWriterError, ValueError):
    """A constructor argument is outside its domain (pitch, dynamic, duration, tempo...)."""


class InvalidPlacement(ScoreWriterError, ValueError):
    """Scheduling an event or phrase would produce a negative or undefined start."""


class EncodingError(ScoreWriterError):
    """A value cannot be represented in the target file format."""


class SinkError(ScoreWriterError):
    """
    Writing the encoded bytes to the destination failed.

    The underlying exception is kept unaltered as ``original`` and
    chained as ``__cause__``. A sink that stops accepting bytes without
    raising has no original exception.
    """

    def __init__(self, message: str, original: BaseException | None = None) -> None:
        super().__init__(message)
        self.original = original
