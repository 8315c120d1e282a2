from __future__ import annotations

from enum import IntEnum


class ChannelType(IntEnum):
    NOTE_OFF = 0x80
    NOTE_ON = 0x90
    POLY_PRESSURE = 0xA0
    CONTROL_CHANGE = 0xB0
    PROGRAM_CHANGE = 0xC0
    CHANNEL_PRESSURE = 0xD0
    PITCH_BEND = 0xE0


class SystemStatus(IntEnum):
    SYSEX_START_N = 0xF0
    MTC = 0xF1
    SONG_POSITION = 0xF2
    SONG_SELECT = 0xF3
    TUNE_REQUEST = 0xF6
    SYSEX_START_A = 0xF7
    TIMING_CLOCK = 0xF8
    START = 0xFA
    CONTINUE = 0xFB
    STOP = 0xFC
    ACTIVE_SENSE = 0xFE
    # Only inside sequence files; 0xFF is system reset on the wire.
    META_EVENT = 0xFF


class MetaType(IntEnum):
    SEQUENCE_NUMBER = 0x00
    GENERIC_TEXT = 0x01
    COPYRIGHT = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC_TEXT = 0x05
    MARKER_TEXT = 0x06
    CUE_POINT = 0x07
    CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    TEMPO = 0x51
    SMPTE = 0x54
    TIMESIG = 0x58
    KEYSIG = 0x59
    SEQUENCER_SPECIFIC = 0x7F


class Controller(IntEnum):
    MAIN_VOLUME = 0x07
    PAN = 0x0A
    DAMPER = 0x40
    LOCAL = 0x7A
    ALL_NOTES_OFF = 0x7B
    OMNI_OFF = 0x7C
    OMNI_ON = 0x7D
    MONO = 0x7E
    POLY = 0x7F


TEXT_META_TYPES = range(0x01, 0x10)

SYSEX_URT_ID = 0x7F

DEFAULT_TEMPO_US = 500_000  # 120 BPM
MAX_TEMPO_US = 0xFFFFFF

BEND_CENTER = 8192
BEND_MIN = -8192
BEND_MAX = 8191

# Encoded length of each channel message type, indexed by the high nibble - 8.
CHANNEL_MSG_LENGTH = (3, 3, 3, 3, 2, 2, 3)

# Encoded length of each system message, indexed by the low nibble of 0xFn.
# Sysex starts count only the start byte; the body lives in the payload.
SYSTEM_MSG_LENGTH = (1, 2, 3, 2, 0, 0, 1, 1, 1, 0, 1, 1, 1, 0, 1, 0)

CHANNEL_MSG_NAMES = {
    ChannelType.NOTE_OFF: "NOTE OFF",
    ChannelType.NOTE_ON: "NOTE ON",
    ChannelType.POLY_PRESSURE: "POLY PRES",
    ChannelType.CONTROL_CHANGE: "CTRL CHANGE",
    ChannelType.PROGRAM_CHANGE: "PROG CHANGE",
    ChannelType.CHANNEL_PRESSURE: "CHAN PRES",
    ChannelType.PITCH_BEND: "BENDER",
}

SYSTEM_MSG_NAMES = {
    SystemStatus.SYSEX_START_N: "SYSEX",
    SystemStatus.MTC: "MTC",
    SystemStatus.SONG_POSITION: "SONG POS",
    SystemStatus.SONG_SELECT: "SONG SELECT",
    SystemStatus.TUNE_REQUEST: "TUNE REQ",
    SystemStatus.SYSEX_START_A: "SYSEX AUTH",
    SystemStatus.TIMING_CLOCK: "CLOCK",
    SystemStatus.START: "START",
    SystemStatus.CONTINUE: "CONTINUE",
    SystemStatus.STOP: "STOP",
    SystemStatus.ACTIVE_SENSE: "ACT SENSE",
    SystemStatus.META_EVENT: "META",
}

META_NAMES = {
    MetaType.SEQUENCE_NUMBER: "SEQUENCE NUMBER",
    MetaType.GENERIC_TEXT: "TEXT",
    MetaType.COPYRIGHT: "COPYRIGHT",
    MetaType.TRACK_NAME: "TRACK NAME",
    MetaType.INSTRUMENT_NAME: "INSTRUMENT",
    MetaType.LYRIC_TEXT: "LYRIC",
    MetaType.MARKER_TEXT: "MARKER",
    MetaType.CUE_POINT: "CUE POINT",
    MetaType.CHANNEL_PREFIX: "CHANNEL PREFIX",
    MetaType.END_OF_TRACK: "END OF TRACK",
    MetaType.TEMPO: "TEMPO",
    MetaType.SMPTE: "SMPTE",
    MetaType.TIMESIG: "TIME SIG",
    MetaType.KEYSIG: "KEY SIG",
    MetaType.SEQUENCER_SPECIFIC: "SEQ SPECIFIC",
}
