"""
Standard MIDI File byte layout.

Serializes a mido MidiFile into the exact bytes of an SMF:

    MThd <len=6> <format> <ntracks> <division>
    MTrk <len> (<delta VLQ> <event bytes>)*   (one chunk per track)

Every delta time is a variable-length quantity (7 data bits per byte,
big-endian, continuation bit on all but the last byte). Each status byte
is written in full; running status is not used.
"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from scorewriter.constants import MAX_VLQ, ErrorMessages
from scorewriter.errors import EncodingError

if TYPE_CHECKING:
    from mido import MidiFile, MidiTrack

HEADER_CHUNK_ID = b"MThd"
TRACK_CHUNK_ID = b"MTrk"
HEADER_LENGTH = 6


def encode_vlq(value: int) -> bytes:
    """
    Encode a non-negative integer as a variable-length quantity.

    >>> encode_vlq(0x7F).hex()
    '7f'
    >>> encode_vlq(0x80).hex()
    '8100'
    >>> encode_vlq(0x0FFFFFFF).hex()
    'ffffff7f'
    """
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_VLQ:
        raise EncodingError(ErrorMessages.VLQ_OUT_OF_RANGE.format(value=value))
    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))


def encode_chunk(chunk_id: bytes, body: bytes) -> bytes:
    """Wrap a body in a chunk: 4-byte id, 4-byte big-endian length, body."""
    if len(chunk_id) != 4:
        raise EncodingError(ErrorMessages.CHUNK_ID.format(chunk_id=chunk_id))
    return chunk_id + struct.pack(">I", len(body)) + body


def encode_header(file_format: int, track_count: int, division: int) -> bytes:
    """The MThd chunk."""
    return encode_chunk(HEADER_CHUNK_ID, struct.pack(">HHH", file_format, track_count, division))


def encode_track(track: MidiTrack) -> bytes:
    """
    The MTrk chunk for one track.

    Message `time` attributes are delta ticks, as in mido.
    """
    body = bytearray()
    for msg in track:
        body += encode_vlq(msg.time)
        body += bytes(msg.bytes())
    return encode_chunk(TRACK_CHUNK_ID, bytes(body))


def serialize(midi_file: MidiFile) -> bytes:
    """Serialize a whole MidiFile: header chunk followed by one chunk per track."""
    data = bytearray(
        encode_header(midi_file.type, len(midi_file.tracks), midi_file.ticks_per_beat)
    )
    for track in midi_file.tracks:
        data += encode_track(track)
    return bytes(data)
