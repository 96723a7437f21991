"""
Constants and enums for score rendering.

No magic numbers - MIDI ranges, resolution and the General MIDI
instrument table live here.
"""

from enum import IntEnum

# Default resolution (ticks per quarter note) for exported files
TICKS_PER_QUARTER = 960

# MIDI data byte range (pitch, velocity, program)
MIDI_MAX = 127

# One channel per part
MAX_CHANNELS = 16

# Microseconds in one minute (tempo meta-event numerator)
MICROSECONDS_PER_MINUTE = 60_000_000

# Largest value a set_tempo meta-event can carry (24 bits)
MAX_TEMPO_MICROSECONDS = 0xFFFFFF

# Largest value a variable-length quantity can carry (4 bytes of 7 bits)
MAX_VLQ = 0x0FFFFFFF


class Instrument(IntEnum):
    """
    General MIDI Level 1 program numbers (0-indexed).

    The order reproduces the standard table exactly so files
    play back with the expected timbre in any GM player.
    """

    # Piano
    ACOUSTIC_GRAND_PIANO = 0
    BRIGHT_ACOUSTIC_PIANO = 1
    ELECTRIC_GRAND_PIANO = 2
    HONKY_TONK_PIANO = 3
    ELECTRIC_PIANO_1 = 4
    ELECTRIC_PIANO_2 = 5
    HARPSICHORD = 6
    CLAVINET = 7
    # Chromatic percussion
    CELESTA = 8
    GLOCKENSPIEL = 9
    MUSIC_BOX = 10
    VIBRAPHONE = 11
    MARIMBA = 12
    XYLOPHONE = 13
    TUBULAR_BELLS = 14
    DULCIMER = 15
    # Organ
    DRAWBAR_ORGAN = 16
    PERCUSSIVE_ORGAN = 17
    ROCK_ORGAN = 18
    CHURCH_ORGAN = 19
    REED_ORGAN = 20
    ACCORDION = 21
    HARMONICA = 22
    TANGO_ACCORDION = 23
    # Guitar
    ACOUSTIC_GUITAR_NYLON = 24
    ACOUSTIC_GUITAR_STEEL = 25
    ELECTRIC_GUITAR_JAZZ = 26
    ELECTRIC_GUITAR_CLEAN = 27
    ELECTRIC_GUITAR_MUTED = 28
    OVERDRIVEN_GUITAR = 29
    DISTORTION_GUITAR = 30
    GUITAR_HARMONICS = 31
    # Bass
    ACOUSTIC_BASS = 32
    ELECTRIC_BASS_FINGER = 33
    ELECTRIC_BASS_PICK = 34
    FRETLESS_BASS = 35
    SLAP_BASS_1 = 36
    SLAP_BASS_2 = 37
    SYNTH_BASS_1 = 38
    SYNTH_BASS_2 = 39
    # Strings
    VIOLIN = 40
    VIOLA = 41
    CELLO = 42
    CONTRABASS = 43
    TREMOLO_STRINGS = 44
    PIZZICATO_STRINGS = 45
    ORCHESTRAL_HARP = 46
    TIMPANI = 47
    # Ensemble
    STRING_ENSEMBLE_1 = 48
    STRING_ENSEMBLE_2 = 49
    SYNTH_STRINGS_1 = 50
    SYNTH_STRINGS_2 = 51
    CHOIR_AAHS = 52
    VOICE_OOHS = 53
    SYNTH_VOICE = 54
    ORCHESTRA_HIT = 55
    # Brass
    TRUMPET = 56
    TROMBONE = 57
    TUBA = 58
    MUTED_TRUMPET = 59
    FRENCH_HORN = 60
    BRASS_SECTION = 61
    SYNTH_BRASS_1 = 62
    SYNTH_BRASS_2 = 63
    # Reed
    SOPRANO_SAX = 64
    ALTO_SAX = 65
    TENOR_SAX = 66
    BARITONE_SAX = 67
    OBOE = 68
    ENGLISH_HORN = 69
    BASSOON = 70
    CLARINET = 71
    # Pipe
    PICCOLO = 72
    FLUTE = 73
    RECORDER = 74
    PAN_FLUTE = 75
    BLOWN_BOTTLE = 76
    SHAKUHACHI = 77
    WHISTLE = 78
    OCARINA = 79
    # Synth lead
    LEAD_1_SQUARE = 80
    LEAD_2_SAWTOOTH = 81
    LEAD_3_CALLIOPE = 82
    LEAD_4_CHIFF = 83
    LEAD_5_CHARANG = 84
    LEAD_6_VOICE = 85
    LEAD_7_FIFTHS = 86
    LEAD_8_BASS_AND_LEAD = 87
    # Synth pad
    PAD_1_NEW_AGE = 88
    PAD_2_WARM = 89
    PAD_3_POLYSYNTH = 90
    PAD_4_CHOIR = 91
    PAD_5_BOWED = 92
    PAD_6_METALLIC = 93
    PAD_7_HALO = 94
    PAD_8_SWEEP = 95
    # Synth effects
    FX_1_RAIN = 96
    FX_2_SOUNDTRACK = 97
    FX_3_CRYSTAL = 98
    FX_4_ATMOSPHERE = 99
    FX_5_BRIGHTNESS = 100
    FX_6_GOBLINS = 101
    FX_7_ECHOES = 102
    FX_8_SCI_FI = 103
    # Ethnic
    SITAR = 104
    BANJO = 105
    SHAMISEN = 106
    KOTO = 107
    KALIMBA = 108
    BAGPIPE = 109
    FIDDLE = 110
    SHANAI = 111
    # Percussive
    TINKLE_BELL = 112
    AGOGO = 113
    STEEL_DRUMS = 114
    WOODBLOCK = 115
    TAIKO_DRUM = 116
    MELODIC_TOM = 117
    SYNTH_DRUM = 118
    REVERSE_CYMBAL = 119
    # Sound effects
    GUITAR_FRET_NOISE = 120
    BREATH_NOISE = 121
    SEASHORE = 122
    BIRD_TWEET = 123
    TELEPHONE_RING = 124
    HELICOPTER = 125
    APPLAUSE = 126
    GUNSHOT = 127

    @property
    def program(self) -> int:
        """The program-change data byte for this instrument."""
        return int(self)

    @property
    def display_name(self) -> str:
        """Human-readable name, e.g. 'Acoustic Grand Piano'."""
        return self.name.replace("_", " ").title()


class ErrorMessages:
    """Standardized error messages."""

    INVALID_PITCH = "Invalid pitch: {value}. Must be an integer between 0 and 127."
    INVALID_PITCH_NAME = "Invalid pitch name: '{name}'. Expected format like 'C4' or 'F#3'."
    INVALID_DYNAMIC = "Invalid dynamic: {value}. Must be an integer between 0 and 127."
    INVALID_DURATION = "Invalid duration: {value}. Must be a positive, finite number of beats."
    INVALID_TEMPO = "Invalid tempo: {value}. Must be a positive integer BPM."
    INVALID_TIME_SIGNATURE = "Invalid time signature: {value}."
    INVALID_KEY_SIGNATURE = "Invalid key signature: {value}. Must be between -7 and 7."
    EMPTY_CHORD = "Chord must contain at least one pitch."
    DUPLICATE_CHORD_PITCH = "Chord contains duplicate pitch {pitch}."
    UNKNOWN_EVENT = "Unknown event type: {kind}."

    POSITIVE_OFFSET = "Late placement offset must be <= 0, got {offset}."
    NEGATIVE_START = "Placement would start at beat {start}, before the phrase start."
    START_BEFORE_PREVIOUS = (
        "Placement would start at beat {start}, before the previous event at beat {previous}."
    )
    INVALID_ADVANCE = "Trailing advance must be in (0, {duration}], got {advance}."
    NEGATIVE_PHRASE_OFFSET = "Phrase start beat must be >= 0, got {start}."

    NO_PARTS = "Score '{title}' has no parts to encode."
    TOO_MANY_PARTS = "Too many parts: {count} (maximum {maximum})."
    DATA_BYTE_OUT_OF_RANGE = "{field} value {value} does not fit a MIDI data byte."
    TEMPO_OUT_OF_RANGE = "Tempo {bpm} BPM does not fit the tempo meta-event."
    VLQ_OUT_OF_RANGE = "Value {value} cannot be encoded as a variable-length quantity."
    CHUNK_ID = "Chunk id must be 4 bytes, got {chunk_id!r}."
    SINK_WRITE_FAILED = "Failed to write encoded score to sink: {error}"
    SINK_STALLED = "Sink accepted no bytes after {written} of {total}."
