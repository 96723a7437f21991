#!/usr/bin/env python3
"""
Example: Generate a simple MIDI file.

A C-E-G arpeggio played by a piano from beat 0 and by strings half a
beat later, at 60 BPM. Open the result in any DAW or MIDI player.

Usage:
    python examples/generate_midi.py
    # Creates: examples/output/arpeggio.mid
"""

import logging
from pathlib import Path

from scorewriter import (
    Chord,
    ChordQuality,
    Duration,
    Dynamic,
    Instrument,
    Note,
    Part,
    Phrase,
    Score,
)


def main() -> None:
    """Generate example MIDI files."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    # Example 1: the same phrase in two parts, offset by half a beat
    print("Generating arpeggio.mid...")
    score = create_arpeggio()
    path = score.write_midi_file(output_dir / "arpeggio.mid")
    print(f"  Created: {path}")

    # Example 2: chords, a held bass and an overlapping melody
    print("\nGenerating cadence.mid...")
    cadence = create_cadence()
    with open(output_dir / "cadence.mid", "wb") as f:
        written = cadence.export(f)
    print(f"  Created: {output_dir / 'cadence.mid'} ({written} bytes)")

    print("\nDone! Open the MIDI files in your DAW to hear them.")


def create_arpeggio() -> Score:
    """
    Piano and strings playing C4 E4 G4.

    This demonstrates:
    - Building a phrase from a note sequence
    - Placing the same phrase in two parts at different offsets
    """
    phrase = Phrase.from_events(Note.sequence(["C4", "E4", "G4"], Duration.QUARTER, Dynamic.MF))

    piano = Part(Instrument.ACOUSTIC_GRAND_PIANO, name="Piano")
    piano.add_phrase(phrase, 0)

    strings = Part(Instrument.STRING_ENSEMBLE_1, name="Strings")
    strings.add_phrase(phrase, 0.5)

    score = Score("Arpeggio", tempo=60)
    score.add_part(piano)
    score.add_part(strings)
    return score


def create_cadence() -> Score:
    """
    A I-IV-V-I cadence in C with a held bass under the first two chords.

    This demonstrates:
    - Chords built from a root and a quality
    - Trailing placement (a bass note that keeps sounding)
    - Simultaneous placement (two melody notes struck together)
    """
    harmony = Phrase("harmony")
    for root, quality in [
        ("C4", ChordQuality.MAJOR),
        ("F3", ChordQuality.MAJOR),
        ("G3", ChordQuality.DOMINANT_7),
        ("C4", ChordQuality.MAJOR),
    ]:
        harmony.add(Chord.from_quality(root, quality, Duration.HALF, Dynamic.MP))

    bass = Phrase("bass")
    bass.add_trailing(Note("C2", Duration.WHOLE, Dynamic.F), Duration.HALF)
    bass.add(Note("F2", Duration.HALF, Dynamic.F))
    bass.add(Note("G2", Duration.HALF, Dynamic.F))
    bass.add(Note("C2", Duration.HALF, Dynamic.F))

    melody = Phrase("melody")
    melody.add(Note("E5", Duration.HALF, Dynamic.MF))
    melody.add(Note("F5", Duration.HALF, Dynamic.MF))
    melody.add(Note("D5", Duration.HALF, Dynamic.MF))
    melody.add_simultaneous(Note("B4", Duration.HALF, Dynamic.P))
    melody.add(Note("C5", Duration.HALF, Dynamic.MF))

    piano = Part(Instrument.ACOUSTIC_GRAND_PIANO, name="Piano")
    piano.add_phrase(harmony, 0)
    piano.add_phrase(bass, 0)

    flute = Part(Instrument.FLUTE, name="Flute")
    flute.add_phrase(melody, 0)

    score = Score("Cadence", tempo=72)
    score.add_part(piano)
    score.add_part(flute)
    return score


if __name__ == "__main__":
    main()
