"""
MIDI export tests.

Tests cover:
- Byte layout: header, chunk lengths, variable-length quantities
- Event flattening and ordering
- Track metadata (tempo, program, names, signatures)
- Failure modes: encoding errors and sink errors
- Determinism

Files are read back with mido to cross-check the hand-written layout.
"""

import io
import logging
import struct
from fractions import Fraction
from pathlib import Path

import pytest
from mido import MidiFile
from pydantic import ValidationError

from scorewriter.compiler import ExportOptions
from scorewriter.compiler.midi import (
    EventKind,
    NoteEvent,
    beats_to_ticks,
    flatten,
    order_events,
    tempo_meta,
)
from scorewriter.compiler.smf import encode_chunk, encode_vlq
from scorewriter.constants import TICKS_PER_QUARTER, Instrument
from scorewriter.core import (
    Chord,
    ChordQuality,
    Duration,
    Dynamic,
    Note,
    Rest,
    Tempo,
    TimeSignature,
)
from scorewriter.errors import EncodingError, SinkError
from scorewriter.models import Metadata, Mode, Part, Phrase, Score


def c_e_g() -> Phrase:
    return Phrase.from_events(Note.sequence(["C4", "E4", "G4"], Duration.QUARTER, Dynamic.MF))


def single_part_score(phrase: Phrase, tempo: int = 120, title: str = "") -> Score:
    part = Part(Instrument.ACOUSTIC_GRAND_PIANO)
    part.add_phrase(phrase, 0)
    score = Score(title, tempo=tempo)
    score.add_part(part)
    return score


def read_back(data: bytes) -> MidiFile:
    return MidiFile(file=io.BytesIO(data))


def absolute_notes(track) -> list[tuple[int, str, int, int]]:
    """(tick, type, note, velocity) for every note message in a track."""
    tick = 0
    notes = []
    for msg in track:
        tick += msg.time
        if msg.type in ("note_on", "note_off"):
            notes.append((tick, msg.type, msg.note, msg.velocity))
    return notes


def split_chunks(data: bytes) -> list[tuple[bytes, bytes]]:
    chunks = []
    pos = 0
    while pos < len(data):
        chunk_id = data[pos : pos + 4]
        (length,) = struct.unpack(">I", data[pos + 4 : pos + 8])
        chunks.append((chunk_id, data[pos + 8 : pos + 8 + length]))
        pos += 8 + length
    return chunks


class RecordingSink:
    """Collects every write call."""

    def __init__(self) -> None:
        self.writes: list[bytes] = []

    def write(self, data: bytes) -> int:
        self.writes.append(data)
        return len(data)


class FailingSink:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def write(self, data: bytes) -> int:
        raise self.error


class ShortWriteSink:
    """Accepts at most `limit` bytes per write, like a pipe."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.buffer = bytearray()
        self.calls = 0

    def write(self, data: bytes) -> int:
        self.calls += 1
        accepted = data[: self.limit]
        self.buffer += accepted
        return len(accepted)


class TestVariableLengthQuantity:
    """Delta times are base-128 with a continuation bit."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0x00, "00"),
            (0x40, "40"),
            (0x7F, "7f"),
            (0x80, "8100"),
            (0x2000, "c000"),
            (0x3FFF, "ff7f"),
            (0x4000, "818000"),
            (0x1FFFFF, "ffff7f"),
            (0x200000, "81808000"),
            (0x0FFFFFFF, "ffffff7f"),
        ],
    )
    def test_known_encodings(self, value: int, expected: str) -> None:
        assert encode_vlq(value).hex() == expected

    @pytest.mark.parametrize("value", [-1, 0x10000000])
    def test_out_of_range(self, value: int) -> None:
        with pytest.raises(EncodingError):
            encode_vlq(value)

    def test_chunk_id_must_be_four_bytes(self) -> None:
        with pytest.raises(EncodingError):
            encode_chunk(b"MTr", b"")


class TestByteLayout:
    """The encoded file, byte for byte."""

    def test_single_note_exact_bytes(self) -> None:
        """One C4 quarter at 60 BPM, no title."""
        score = single_part_score(Phrase.from_events([Note("C4", Duration.QUARTER)]), tempo=60)
        expected = bytes.fromhex(
            "4d546864 00000006 0001 0001 03c0"  # MThd, format 1, 1 track, 960 tpq
            "4d54726b 00000017"  # MTrk, 23 bytes
            "00 ff5103 0f4240"  # set_tempo 1,000,000
            "00 c000"  # program change, piano, channel 0
            "00 903c46"  # note on C4, velocity 70
            "8740 803c00"  # 960 ticks later, note off
            "00 ff2f00"  # end of track
        )
        assert score.to_bytes() == expected

    def test_header(self) -> None:
        score = single_part_score(c_e_g())
        data = score.to_bytes()
        assert data[:4] == b"MThd"
        assert struct.unpack(">IHHH", data[4:14]) == (6, 1, 1, TICKS_PER_QUARTER)

    def test_track_count_matches_parts(self) -> None:
        score = Score("Duet")
        for instrument in (Instrument.VIOLIN, Instrument.CELLO, Instrument.FLUTE):
            part = Part(instrument)
            part.add_phrase(c_e_g(), 0)
            score.add_part(part)
        data = score.to_bytes()
        assert struct.unpack(">H", data[10:12]) == (3,)
        assert len(read_back(data).tracks) == 3

    def test_chunk_lengths_match_bodies(self) -> None:
        """Every declared length equals the body that follows it."""
        score = Score("Layout", metadata=Metadata(2, Mode.MAJOR, TimeSignature(3, 4)))
        for offset in (0, Fraction(1, 3)):
            part = Part(Instrument.VIOLIN, name="Violin")
            part.add_phrase(c_e_g(), offset)
            score.add_part(part)

        data = score.to_bytes()
        chunks = split_chunks(data)
        assert [chunk_id for chunk_id, _ in chunks] == [b"MThd", b"MTrk", b"MTrk"]
        assert sum(8 + len(body) for _, body in chunks) == len(data)
        for _, body in chunks[1:]:
            assert body.endswith(b"\xff\x2f\x00")

    def test_no_running_status(self) -> None:
        """Every channel event carries its status byte."""
        score = single_part_score(Phrase.from_events(Note.sequence([60, 62, 64], 1)))
        track_body = split_chunks(score.to_bytes())[1][1]
        assert track_body.count(b"\x90") == 3
        assert track_body.count(b"\x80") == 3

    def test_custom_resolution(self) -> None:
        score = single_part_score(c_e_g())
        data = score.to_bytes(ExportOptions(ticks_per_quarter=480))
        assert struct.unpack(">H", data[12:14]) == (480,)
        notes = absolute_notes(read_back(data).tracks[0])
        assert notes[-1][0] == 3 * 480


class TestTicks:
    """Beat to tick conversion."""

    def test_whole_beats(self) -> None:
        assert beats_to_ticks(0) == 0
        assert beats_to_ticks(1) == TICKS_PER_QUARTER
        assert beats_to_ticks(Fraction(1, 3)) == 320

    def test_rounds_half_to_even(self) -> None:
        assert beats_to_ticks(Fraction(1, 2), 5) == 2
        assert beats_to_ticks(Fraction(3, 2), 5) == 8

    def test_note_shorter_than_a_tick(self) -> None:
        """A note that rounds to zero ticks cannot be encoded."""
        score = single_part_score(Phrase.from_events([Note("C4", Duration.EIGHTH)]))
        with pytest.raises(EncodingError):
            score.to_bytes(ExportOptions(ticks_per_quarter=1))


class TestFlattening:
    """Resolved events become note-on/note-off pairs."""

    def test_three_notes(self) -> None:
        """C E G quarters: on/off pairs at 0, 960, 1920."""
        notes = absolute_notes(read_back(single_part_score(c_e_g()).to_bytes()).tracks[0])
        assert notes == [
            (0, "note_on", 60, 70),
            (960, "note_off", 60, 0),
            (960, "note_on", 64, 70),
            (1920, "note_off", 64, 0),
            (1920, "note_on", 67, 70),
            (2880, "note_off", 67, 0),
        ]

    def test_chord(self) -> None:
        """A triad gives three ons at one tick and three offs at its end."""
        chord = Chord.from_quality("C4", ChordQuality.MAJOR, Duration.HALF, Dynamic.F)
        score = single_part_score(Phrase.from_events([chord]))
        notes = absolute_notes(read_back(score.to_bytes()).tracks[0])
        ons = [n for n in notes if n[1] == "note_on"]
        offs = [n for n in notes if n[1] == "note_off"]
        assert ons == [(0, "note_on", p, 85) for p in (60, 64, 67)]
        assert offs == [(1920, "note_off", p, 0) for p in (60, 64, 67)]

    def test_rests_emit_nothing(self) -> None:
        phrase = Phrase.from_events([Note("C4", 1), Rest(1), Note("D4", 1)])
        notes = absolute_notes(read_back(single_part_score(phrase).to_bytes()).tracks[0])
        assert [(n[0], n[1]) for n in notes] == [
            (0, "note_on"),
            (960, "note_off"),
            (1920, "note_on"),
            (2880, "note_off"),
        ]

    def test_flatten_skips_rests(self) -> None:
        phrase = Phrase.from_events([Rest(1), Note("C4", 1)])
        events = flatten(phrase.resolve())
        assert [(e.tick, e.kind) for e in events] == [
            (960, EventKind.NOTE_ON),
            (1920, EventKind.NOTE_OFF),
        ]

    def test_empty_phrase_gives_minimal_track(self) -> None:
        """No events: the track holds only its setup messages and end of track."""
        score = single_part_score(Phrase())
        track = read_back(score.to_bytes()).tracks[0]
        assert absolute_notes(track) == []
        assert [msg.type for msg in track] == ["set_tempo", "program_change", "end_of_track"]


class TestOrdering:
    """Sub-events sort by tick, offs before ons, then authoring order."""

    def test_repeated_pitch_off_before_on(self) -> None:
        """A repeated note is released before it is struck again."""
        phrase = Phrase.from_events(Note.sequence(["C4", "C4"], Duration.QUARTER))
        notes = absolute_notes(read_back(single_part_score(phrase).to_bytes()).tracks[0])
        assert [(n[0], n[1]) for n in notes] == [
            (0, "note_on"),
            (960, "note_off"),
            (960, "note_on"),
            (1920, "note_off"),
        ]

    def test_order_events_tie_break(self) -> None:
        events = [
            NoteEvent(0, EventKind.NOTE_ON, 64, 70, order=1),
            NoteEvent(960, EventKind.NOTE_ON, 67, 70, order=2),
            NoteEvent(960, EventKind.NOTE_OFF, 64, 0, order=1),
            NoteEvent(0, EventKind.NOTE_ON, 60, 70, order=0),
            NoteEvent(960, EventKind.NOTE_OFF, 60, 0, order=0),
        ]
        ordered = order_events(events)
        assert [(e.tick, e.kind, e.pitch) for e in ordered] == [
            (0, EventKind.NOTE_ON, 60),
            (0, EventKind.NOTE_ON, 64),
            (960, EventKind.NOTE_OFF, 60),
            (960, EventKind.NOTE_OFF, 64),
            (960, EventKind.NOTE_ON, 67),
        ]

    def test_overlapping_duplicates_stay_independent(self) -> None:
        part = Part()
        part.add_phrase(c_e_g(), 0)
        part.add_phrase(c_e_g(), 0)
        score = Score("Unison")
        score.add_part(part)
        notes = absolute_notes(read_back(score.to_bytes()).tracks[0])
        assert len(notes) == 12
        assert notes[:2] == [(0, "note_on", 60, 70), (0, "note_on", 60, 70)]

    def test_trailing_note_sustains(self) -> None:
        phrase = Phrase()
        phrase.add_trailing(Note("C3", Duration.WHOLE), Duration.QUARTER)
        phrase.add(Note("E4", Duration.QUARTER))
        notes = absolute_notes(read_back(single_part_score(phrase).to_bytes()).tracks[0])
        assert notes == [
            (0, "note_on", 48, 70),
            (960, "note_on", 64, 70),
            (1920, "note_off", 64, 0),
            (3840, "note_off", 48, 0),
        ]

    def test_late_note(self) -> None:
        phrase = Phrase()
        phrase.add(Note("C4", Duration.HALF))
        phrase.add_late(Note("G4", Duration.QUARTER), -1)
        notes = absolute_notes(read_back(single_part_score(phrase).to_bytes()).tracks[0])
        assert notes == [
            (0, "note_on", 60, 70),
            (960, "note_on", 67, 70),
            (1920, "note_off", 60, 0),
            (1920, "note_off", 67, 0),
        ]


class TestTrackMetadata:
    """Tempo, program, names and signatures."""

    def test_tempo_60_bpm(self) -> None:
        """60 BPM is 1,000,000 microseconds per quarter."""
        track = read_back(single_part_score(c_e_g(), tempo=60).to_bytes()).tracks[0]
        tempos = [msg.tempo for msg in track if msg.type == "set_tempo"]
        assert tempos == [1_000_000]

    def test_tempo_meta_uses_microseconds_per_beat(self) -> None:
        for bpm in (4, 60, 90, 120, 300):
            tempo = Tempo(bpm)
            assert tempo_meta(tempo).tempo == tempo.microseconds_per_beat

    def test_tempo_only_on_first_track(self) -> None:
        score = Score("Two", tempo=90)
        for _ in range(2):
            part = Part()
            part.add_phrase(c_e_g(), 0)
            score.add_part(part)
        mid = read_back(score.to_bytes())
        assert [msg.tempo for msg in mid.tracks[0] if msg.type == "set_tempo"] == [666_666]
        assert not [msg for msg in mid.tracks[1] if msg.type == "set_tempo"]

    def test_program_and_channel_per_part(self) -> None:
        """Part i plays its instrument on channel i."""
        score = Score("Ensemble")
        piano = Part(Instrument.ACOUSTIC_GRAND_PIANO)
        piano.add_phrase(c_e_g(), 0)
        strings = Part(Instrument.STRING_ENSEMBLE_1)
        strings.add_phrase(c_e_g(), 0.5)
        score.add_part(piano)
        score.add_part(strings)

        mid = read_back(score.to_bytes())
        for channel, (track, program) in enumerate(zip(mid.tracks, (0, 48), strict=True)):
            changes = [msg for msg in track if msg.type == "program_change"]
            assert [(m.channel, m.program) for m in changes] == [(channel, program)]
            notes = [msg for msg in track if msg.type in ("note_on", "note_off")]
            assert {m.channel for m in notes} == {channel}

        # Strings start half a beat later
        assert absolute_notes(mid.tracks[1])[0][0] == 480

    def test_tenth_part_uses_channel_nine(self) -> None:
        """Channels follow part order, including the percussion channel."""
        score = Score("Ten")
        for _ in range(10):
            part = Part(Instrument.VIOLIN)
            part.add_phrase(c_e_g(), 0)
            score.add_part(part)
        mid = read_back(score.to_bytes())
        channels = [
            {msg.channel for msg in track if msg.type == "note_on"} for track in mid.tracks
        ]
        assert channels == [{i} for i in range(10)]

    def test_track_names(self) -> None:
        """The title names track 0, part names name the others."""
        score = Score("Sonata")
        for name in ("Piano", "Violin"):
            part = Part(name=name)
            part.add_phrase(c_e_g(), 0)
            score.add_part(part)
        mid = read_back(score.to_bytes())
        names = [[m.name for m in track if m.type == "track_name"] for track in mid.tracks]
        assert names == [["Sonata"], ["Violin"]]

    def test_part_name_on_first_track_without_title(self) -> None:
        part = Part(name="Piano")
        part.add_phrase(c_e_g(), 0)
        score = Score()
        score.add_part(part)
        track = read_back(score.to_bytes()).tracks[0]
        assert [m.name for m in track if m.type == "track_name"] == ["Piano"]

    def test_track_names_disabled(self) -> None:
        score = single_part_score(c_e_g(), title="Quiet")
        track = read_back(score.to_bytes(ExportOptions(include_track_names=False))).tracks[0]
        assert not [m for m in track if m.type == "track_name"]

    def test_unencodable_title(self) -> None:
        score = single_part_score(c_e_g(), title="♫ Song")
        with pytest.raises(EncodingError):
            score.to_bytes()

    def test_time_and_key_signature(self) -> None:
        score = Score("Waltz", metadata=Metadata(-3, Mode.MAJOR, TimeSignature(3, 4)))
        part = Part()
        part.add_phrase(c_e_g(), 0)
        score.add_part(part)
        track = read_back(score.to_bytes()).tracks[0]

        time_sigs = [m for m in track if m.type == "time_signature"]
        assert [(m.numerator, m.denominator) for m in time_sigs] == [(3, 4)]
        keys = [m.key for m in track if m.type == "key_signature"]
        assert keys == ["Eb"]

    def test_no_signatures_without_metadata(self) -> None:
        track = read_back(single_part_score(c_e_g()).to_bytes()).tracks[0]
        assert not [m for m in track if m.type in ("time_signature", "key_signature")]


class TestEncodingErrors:
    """Scores that cannot be represented fail with EncodingError."""

    def test_no_parts(self) -> None:
        with pytest.raises(EncodingError):
            Score("Empty").to_bytes()

    def test_too_many_parts(self) -> None:
        score = Score("Crowd")
        for _ in range(16):
            part = Part()
            part.add_phrase(c_e_g(), 0)
            score.add_part(part)
        assert len(read_back(score.to_bytes()).tracks) == 16

        score.add_part(Part())
        with pytest.raises(EncodingError):
            score.to_bytes()

    def test_tempo_too_slow_for_meta_event(self) -> None:
        """Below 4 BPM the tempo does not fit 24 bits."""
        with pytest.raises(EncodingError):
            single_part_score(c_e_g(), tempo=3).to_bytes()
        assert single_part_score(c_e_g(), tempo=4).to_bytes()


class TestExport:
    """Score.export and file output."""

    def test_complete_sink_takes_one_write(self) -> None:
        score = single_part_score(c_e_g())
        sink = RecordingSink()
        written = score.export(sink)
        assert len(sink.writes) == 1
        assert sink.writes[0] == score.to_bytes()
        assert written == len(sink.writes[0])

    def test_export_to_bytes_io(self) -> None:
        buffer = io.BytesIO()
        single_part_score(c_e_g()).export(buffer)
        assert buffer.getvalue()[:4] == b"MThd"

    def test_failed_encode_writes_nothing(self) -> None:
        sink = RecordingSink()
        with pytest.raises(EncodingError):
            Score("Empty").export(sink)
        assert sink.writes == []

    def test_sink_failure(self, caplog: pytest.LogCaptureFixture) -> None:
        """Write errors surface as SinkError wrapping the original."""
        error = OSError("disk full")
        with caplog.at_level(logging.ERROR, logger="scorewriter.models.score"):
            with pytest.raises(SinkError) as exc_info:
                single_part_score(c_e_g()).export(FailingSink(error))
        assert exc_info.value.original is error
        assert exc_info.value.__cause__ is error
        assert "disk full" in caplog.text

    def test_short_writes_are_completed(self) -> None:
        """A sink taking 10 bytes at a time still receives the whole file."""
        score = single_part_score(c_e_g())
        expected = score.to_bytes()
        sink = ShortWriteSink(10)
        written = score.export(sink)
        assert bytes(sink.buffer) == expected
        assert written == len(expected)
        assert sink.calls == -(-len(expected) // 10)

    def test_stalled_sink(self, caplog: pytest.LogCaptureFixture) -> None:
        """A sink accepting no bytes raises SinkError instead of looping."""
        with caplog.at_level(logging.ERROR, logger="scorewriter.models.score"):
            with pytest.raises(SinkError) as exc_info:
                single_part_score(c_e_g()).export(ShortWriteSink(0))
        assert exc_info.value.original is None
        assert "accepted no bytes" in caplog.text

    def test_write_midi_file(self, temp_midi_path: Path) -> None:
        score = single_part_score(c_e_g(), title="Saved")
        path = score.write_midi_file(temp_midi_path)
        assert path.exists()
        loaded = MidiFile(str(path))
        assert loaded.type == 1
        assert loaded.ticks_per_beat == TICKS_PER_QUARTER
        assert path.read_bytes() == score.to_bytes()

    def test_write_midi_file_creates_directories(self, temp_dir: Path) -> None:
        path = single_part_score(c_e_g()).write_midi_file(temp_dir / "out" / "song.mid")
        assert path.exists()

    def test_to_midi_file(self) -> None:
        mid = single_part_score(c_e_g()).to_midi_file()
        assert isinstance(mid, MidiFile)
        assert mid.type == 1
        assert len(mid.tracks) == 1


class TestDeterminism:
    """Same score, same bytes."""

    def test_encoding_is_idempotent(self) -> None:
        score = single_part_score(c_e_g(), title="Again")
        assert score.to_bytes() == score.to_bytes()

    def test_equal_scores_encode_equally(self) -> None:
        assert single_part_score(c_e_g()).to_bytes() == single_part_score(c_e_g()).to_bytes()


class TestExportOptions:
    """Validated encoder settings."""

    def test_defaults(self) -> None:
        options = ExportOptions()
        assert options.ticks_per_quarter == TICKS_PER_QUARTER
        assert options.include_track_names is True

    @pytest.mark.parametrize("ticks", [0, -1, 0x8000])
    def test_invalid_resolution(self, ticks: int) -> None:
        with pytest.raises(ValidationError):
            ExportOptions(ticks_per_quarter=ticks)

    def test_frozen(self) -> None:
        options = ExportOptions()
        with pytest.raises(ValidationError):
            options.ticks_per_quarter = 480
