"""
Phrase - an ordered run of events resolved onto a local beat timeline.

A Phrase is an append-only builder. Each added event carries a placement
rule, and its start/end beats are resolved immediately, so a bad
placement fails at the call that introduced it:

- sequential (add): the event starts at the cursor, the cursor moves by
  the event's duration
- late (add_late / add_simultaneous): the event starts at or before the
  cursor, overlapping what came before; the cursor moves to the latest
  end seen so far
- trailing (add_trailing): the event starts at the cursor and sounds for
  its full duration, but the cursor only moves by `advance`, so the next
  event starts while this one is still sounding

The cursor never moves backwards and start times never decrease in
placement order. The phrase length is the latest end beat.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction

from scorewriter.constants import ErrorMessages
from scorewriter.core.chord import Chord
from scorewriter.core.note import Note, Rest
from scorewriter.core.rhythm import BeatsLike, Duration, to_beats
from scorewriter.errors import InvalidPlacement

Event = Note | Chord | Rest


def event_duration(event: Event) -> Fraction:
    """Length in beats of any event variant."""
    if isinstance(event, Note):
        return event.duration.beats
    if isinstance(event, Chord):
        return event.duration.beats
    if isinstance(event, Rest):
        return event.duration.beats
    raise TypeError(ErrorMessages.UNKNOWN_EVENT.format(kind=type(event).__name__))


class Placement(str, Enum):
    """How an event is positioned relative to the phrase cursor."""

    SEQUENTIAL = "sequential"
    LATE = "late"
    TRAILING = "trailing"


@dataclass(frozen=True)
class PhraseEntry:
    """An event as it was added, with its placement rule."""

    event: Event
    placement: Placement = Placement.SEQUENTIAL
    offset: Fraction = Fraction(0)  # late: start relative to the cursor (<= 0)
    advance: Fraction | None = None  # trailing: how far the cursor moves


@dataclass(frozen=True)
class ResolvedEvent:
    """
    An event with absolute start and end beats.

    `order` is the authoring index: the position of the event in the
    order it was added. It breaks ties deterministically downstream.
    """

    start: Fraction
    end: Fraction
    event: Event
    order: int

    def shifted(self, offset: Fraction, order: int | None = None) -> ResolvedEvent:
        """Return a copy moved later by `offset` beats."""
        return replace(
            self,
            start=self.start + offset,
            end=self.end + offset,
            order=self.order if order is None else order,
        )


class Phrase:
    """
    An append-only sequence of Notes, Chords and Rests.

    Example:
        phrase = Phrase("arpeggio")
        for name in ("C4", "E4", "G4"):
            phrase.add(Note(name, Duration.QUARTER, Dynamic.MF))
        phrase.length  # Fraction(3)
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._entries: list[PhraseEntry] = []
        self._resolved: list[ResolvedEvent] = []
        self._cursor = Fraction(0)
        self._last_start = Fraction(0)
        self._length = Fraction(0)

    @classmethod
    def from_events(cls, events: Iterable[Event], name: str = "") -> Phrase:
        """Build a phrase placing every event sequentially."""
        phrase = cls(name)
        phrase.extend(events)
        return phrase

    # -- placement -------------------------------------------------------

    def add(self, event: Event) -> ResolvedEvent:
        """Place an event at the cursor; the cursor moves by its duration."""
        duration = event_duration(event)
        start = self._cursor
        return self._place(
            PhraseEntry(event),
            start=start,
            cursor=start + duration,
        )

    def add_rest(self, duration: Duration | BeatsLike) -> ResolvedEvent:
        """Place a rest at the cursor."""
        return self.add(Rest(duration))

    def extend(self, events: Iterable[Event]) -> None:
        """Place several events sequentially, one after the other."""
        for event in events:
            self.add(event)

    def add_late(self, event: Event, offset: Duration | BeatsLike) -> ResolvedEvent:
        """
        Place an event `offset` beats before the cursor (offset <= 0).

        The event overlaps whatever is still sounding. The cursor moves
        to the latest end seen so far, including any trailing event still
        sounding, and never moves backwards.

        Raises:
            InvalidPlacement: if offset > 0, or the start would be
                negative or earlier than the previously placed event
        """
        offset_beats = to_beats(offset)
        if offset_beats > 0:
            raise InvalidPlacement(ErrorMessages.POSITIVE_OFFSET.format(offset=offset_beats))
        duration = event_duration(event)
        start = self._cursor + offset_beats
        return self._place(
            PhraseEntry(event, Placement.LATE, offset=offset_beats),
            start=start,
            cursor=max(self._cursor, self._length, start + duration),
        )

    def add_simultaneous(self, event: Event) -> ResolvedEvent:
        """Start an event together with the previously placed one."""
        return self.add_late(event, self._last_start - self._cursor)

    def add_trailing(self, event: Event, advance: Duration | BeatsLike) -> ResolvedEvent:
        """
        Place an event at the cursor but move the cursor by only `advance`.

        The event keeps sounding for its full duration into the time of
        the events that follow. 0 < advance <= duration.

        Raises:
            InvalidPlacement: if advance is not within (0, duration]
        """
        advance_beats = to_beats(advance)
        duration = event_duration(event)
        if not 0 < advance_beats <= duration:
            raise InvalidPlacement(
                ErrorMessages.INVALID_ADVANCE.format(duration=duration, advance=advance_beats)
            )
        start = self._cursor
        return self._place(
            PhraseEntry(event, Placement.TRAILING, advance=advance_beats),
            start=start,
            cursor=start + advance_beats,
        )

    def _place(self, entry: PhraseEntry, start: Fraction, cursor: Fraction) -> ResolvedEvent:
        if start < 0:
            raise InvalidPlacement(ErrorMessages.NEGATIVE_START.format(start=start))
        if self._resolved and start < self._last_start:
            raise InvalidPlacement(
                ErrorMessages.START_BEFORE_PREVIOUS.format(start=start, previous=self._last_start)
            )

        end = start + event_duration(entry.event)
        resolved = ResolvedEvent(start, end, entry.event, order=len(self._resolved))

        self._entries.append(entry)
        self._resolved.append(resolved)
        self._last_start = start
        self._cursor = cursor
        self._length = max(self._length, end)
        return resolved

    # -- inspection ------------------------------------------------------

    def resolve(self) -> list[ResolvedEvent]:
        """The resolved events in authoring order (start beats non-decreasing)."""
        return list(self._resolved)

    @property
    def entries(self) -> tuple[PhraseEntry, ...]:
        """The events as added, with their placement rules."""
        return tuple(self._entries)

    @property
    def length(self) -> Fraction:
        """The phrase's ending beat: the latest end over all events (0 if empty)."""
        return self._length

    @property
    def cursor(self) -> Fraction:
        """Where the next sequentially added event would start."""
        return self._cursor

    @property
    def is_empty(self) -> bool:
        return not self._entries

    def copy(self) -> Phrase:
        """An independent copy; events are immutable so they are shared."""
        clone = Phrase(self.name)
        clone._entries = list(self._entries)
        clone._resolved = list(self._resolved)
        clone._cursor = self._cursor
        clone._last_start = self._last_start
        clone._length = self._length
        return clone

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ResolvedEvent]:
        return iter(self._resolved)

    def __repr__(self) -> str:
        return f"Phrase({self.name!r}, events={len(self)}, length={self._length})"
