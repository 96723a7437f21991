"""
Score structure - the scheduling layer.

This module provides:
- Phrase: Events placed sequentially, late or trailing on a local timeline
- Part: Phrases placed at beat offsets for one instrument
- Score: Parts, tempo and metadata, and the export entry point
"""

from scorewriter.models.part import Part, PlacedPhrase
from scorewriter.models.phrase import (
    Event,
    Phrase,
    PhraseEntry,
    Placement,
    ResolvedEvent,
    event_duration,
)
from scorewriter.models.score import Metadata, Mode, Score, Sink

__all__ = [
    # Phrase
    "Event",
    "Phrase",
    "PhraseEntry",
    "Placement",
    "ResolvedEvent",
    "event_duration",
    # Part
    "Part",
    "PlacedPhrase",
    # Score
    "Metadata",
    "Mode",
    "Score",
    "Sink",
]
