"""
Part - one instrument's phrases placed on a shared beat timeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from scorewriter.constants import ErrorMessages, Instrument
from scorewriter.core.rhythm import BeatsLike, Duration, to_beats
from scorewriter.errors import InvalidPlacement, InvalidValue
from scorewriter.models.phrase import Phrase, ResolvedEvent


@dataclass(frozen=True)
class PlacedPhrase:
    """A phrase owned by a part, starting at `start` beats."""

    phrase: Phrase
    start: Fraction

    @property
    def end(self) -> Fraction:
        return self.start + self.phrase.length


class Part:
    """
    A score part played by a single instrument.

    Phrases may overlap in time - layering a second line while the first
    is still sounding is expected, and nothing is merged: two phrases
    sounding the same pitch at once produce two independent notes.

    Each phrase is copied on insertion, so the same Phrase value can be
    added to several parts (or twice to one part) without sharing.
    """

    def __init__(
        self,
        instrument: Instrument | int = Instrument.ACOUSTIC_GRAND_PIANO,
        name: str = "",
    ) -> None:
        try:
            self.instrument = Instrument(instrument)
        except ValueError as e:
            raise InvalidValue(f"Unknown instrument program: {instrument}") from e
        self.name = name
        self._phrases: list[PlacedPhrase] = []
        self._length = Fraction(0)
        self._previous_phrase_end = Fraction(0)

    def add_phrase(self, phrase: Phrase, start_beat: Duration | BeatsLike = 0) -> PlacedPhrase:
        """
        Insert a copy of `phrase` starting at `start_beat` (>= 0).

        Raises:
            InvalidPlacement: if start_beat is negative
        """
        start = to_beats(start_beat)
        if start < 0:
            raise InvalidPlacement(ErrorMessages.NEGATIVE_PHRASE_OFFSET.format(start=start))

        placed = PlacedPhrase(phrase.copy(), start)
        self._phrases.append(placed)
        self._length = max(self._length, placed.end)
        self._previous_phrase_end = placed.end
        return placed

    def append_phrase_to_previous(self, phrase: Phrase) -> PlacedPhrase:
        """
        Start a phrase where the last added phrase ends.

        Longer phrases added earlier may still be sounding.
        """
        return self.add_phrase(phrase, self._previous_phrase_end)

    def append_phrase_to_part_end(self, phrase: Phrase) -> PlacedPhrase:
        """Start a phrase after every phrase already in the part has ended."""
        return self.add_phrase(phrase, self._length)

    def timeline(self) -> list[ResolvedEvent]:
        """
        All events of the part at absolute beats, ordered by start.

        Each phrase's local times are shifted by its start offset. Events
        starting together keep authoring order (phrase order, then event
        order), and `order` is renumbered to that part-wide index.
        """
        events: list[ResolvedEvent] = []
        for placed in self._phrases:
            for resolved in placed.phrase.resolve():
                events.append(resolved.shifted(placed.start, order=len(events)))
        # sort is stable, ties keep authoring order
        events.sort(key=lambda e: e.start)
        return events

    @property
    def phrases(self) -> tuple[PlacedPhrase, ...]:
        return tuple(self._phrases)

    @property
    def length(self) -> Fraction:
        """The latest end beat over all phrases."""
        return self._length

    def copy(self) -> Part:
        """An independent copy of this part and its phrases."""
        clone = Part(self.instrument, self.name)
        for placed in self._phrases:
            clone.add_phrase(placed.phrase, placed.start)
        clone._previous_phrase_end = self._previous_phrase_end
        return clone

    def __repr__(self) -> str:
        label = self.name or self.instrument.display_name
        return f"Part({label!r}, phrases={len(self._phrases)}, length={self._length})"
