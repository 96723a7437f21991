#!/usr/bin/env python3
"""
Example: Inspect a score's resolved timeline.

Prints the Timeline IR of a short canon as YAML, then a summary and a
diff against a variant with the second voice entering later.

Usage:
    python examples/timeline_ir.py
"""

from scorewriter import (
    Duration,
    Instrument,
    Metadata,
    Mode,
    Note,
    Part,
    Phrase,
    Scale,
    ScaleType,
    Score,
    TimeSignature,
)


def build_canon(entry_beat: int) -> Score:
    """Two voices playing a rising D minor scale, the second entering later."""
    scale = Scale("D4", ScaleType.NATURAL_MINOR)
    subject = Phrase.from_events(Note.sequence(scale.pitches(), Duration.EIGHTH), name="subject")

    score = Score("Canon", tempo=96, metadata=Metadata(-1, Mode.MINOR, TimeSignature(4, 4)))
    for name, start in (("Leader", 0), ("Follower", entry_beat)):
        part = Part(Instrument.HARPSICHORD, name=name)
        part.add_phrase(subject, start)
        part.append_phrase_to_previous(subject)
        score.add_part(part)
    return score


def main() -> None:
    ir = build_canon(entry_beat=2).timeline_ir()
    print(ir.to_yaml())

    print("Summary:")
    for key, value in ir.summary().items():
        print(f"  {key}: {value}")

    later = build_canon(entry_beat=4).timeline_ir()
    print("\nDiff against a later entry:")
    for key, value in ir.diff_summary(later).items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
