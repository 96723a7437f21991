"""
Pytest configuration and shared fixtures.
"""

import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from scorewriter.core import Duration, Dynamic, Note
from scorewriter.models import Phrase


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_midi_path(temp_dir: Path) -> Path:
    """Path for a temporary MIDI file."""
    return temp_dir / "test.mid"


@pytest.fixture
def arpeggio() -> Phrase:
    """C4 E4 G4 quarter notes at mezzo-forte, placed one after another."""
    return Phrase.from_events(
        Note.sequence(["C4", "E4", "G4"], Duration.QUARTER, Dynamic.MF), name="arpeggio"
    )
