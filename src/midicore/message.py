"""Packed MIDI message value and internal service markers.

A :class:`MidiMessage` holds one protocol message in a status byte plus six
data bytes.  The meaning of the data bytes depends on the kind of message:

+------------------+-----------+-------------------------------------------+
| Kind             | byte1     | byte2 .. byte6                            |
+==================+===========+===========================================+
| note / poly pres | note      | velocity / pressure                       |
| control change   | control   | value                                     |
| program change   | program   |                                           |
| channel pressure | pressure  |                                           |
| pitch bend       | low 7     | high 7                                    |
| meta event       | meta type | up to ``data_length`` payload bytes       |
| URT sysex        | 0x7F      | device id, sub id, up to three data bytes |
+------------------+-----------+-------------------------------------------+

Service markers (no-op, beat marker, user marker) are never protocol bytes
and are modelled by the separate :class:`ServiceMarker` type.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    BEND_CENTER,
    BEND_MAX,
    BEND_MIN,
    CHANNEL_MSG_LENGTH,
    CHANNEL_MSG_NAMES,
    DEFAULT_TEMPO_US,
    MAX_TEMPO_US,
    META_NAMES,
    SYSEX_URT_ID,
    SYSTEM_MSG_LENGTH,
    SYSTEM_MSG_NAMES,
    TEXT_META_TYPES,
    ChannelType,
    Controller,
    MetaType,
    SystemStatus,
)

_TEMPO32_FACTOR = 60_000_000 * 32


def _check_range(value: int, lo: int, hi: int, name: str) -> None:
    if not (lo <= value <= hi):
        raise ValueError(f"{name} must be in [{lo}, {hi}], got {value!r}")


def _check_channel(chan: int) -> None:
    _check_range(chan, 0, 15, "channel")


def _check_7bit(value: int, name: str) -> None:
    _check_range(value, 0, 127, name)


def encode_bend(value: int) -> tuple[int, int]:
    """Split a signed 14 bit bend value into ``(low, high)`` 7 bit bytes."""
    _check_range(value, BEND_MIN, BEND_MAX, "bend value")
    raw = value + BEND_CENTER
    return raw & 0x7F, (raw >> 7) & 0x7F


def decode_bend(low: int, high: int) -> int:
    return ((high << 7) | low) - BEND_CENTER


class ServiceKind(Enum):
    NO_OP = "no_op"
    BEAT_MARKER = "beat_marker"
    USER_APP_MARKER = "user_app_marker"


_SERVICE_NAMES = {
    ServiceKind.NO_OP: "NO OP",
    ServiceKind.BEAT_MARKER: "BEAT MARKER",
    ServiceKind.USER_APP_MARKER: "USER APP MARKER",
}


@dataclass(frozen=True)
class ServiceMarker:
    """Internal bookkeeping entry of a sequence; never a protocol message."""

    kind: ServiceKind

    @classmethod
    def no_op(cls) -> ServiceMarker:
        return cls(ServiceKind.NO_OP)

    @classmethod
    def beat_marker(cls) -> ServiceMarker:
        return cls(ServiceKind.BEAT_MARKER)

    @classmethod
    def user_app_marker(cls) -> ServiceMarker:
        return cls(ServiceKind.USER_APP_MARKER)

    def is_service_msg(self) -> bool:
        return True

    def is_no_op(self) -> bool:
        return self.kind is ServiceKind.NO_OP

    def is_beat_marker(self) -> bool:
        return self.kind is ServiceKind.BEAT_MARKER

    def is_user_app_marker(self) -> bool:
        return self.kind is ServiceKind.USER_APP_MARKER

    def get_length(self) -> int:
        return 0

    def copy(self) -> ServiceMarker:
        return self

    def to_text(self) -> str:
        return _SERVICE_NAMES[self.kind]

    def __str__(self) -> str:
        return self.to_text()


def _zero_data() -> bytearray:
    return bytearray(6)


@dataclass
class MidiMessage:
    """One MIDI protocol message packed into a status byte and six data bytes.

    Predicates are pure functions of the status byte and ``byte1``.  Kind
    setters (``set_note_on`` and friends) clear the value before writing the
    bytes of their kind, so fields that do not belong to the current kind
    read as zero.
    """

    status: int = 0
    data: bytearray = field(default_factory=_zero_data)
    data_length: int = 0

    def __post_init__(self) -> None:
        self.data = bytearray(self.data)
        if len(self.data) != 6:
            raise ValueError(f"data must hold exactly 6 bytes, got {len(self.data)}")

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def clear(self) -> None:
        self.status = 0
        self.data[:] = bytes(6)
        self.data_length = 0

    def copy(self) -> MidiMessage:
        return MidiMessage(self.status, bytearray(self.data), self.data_length)

    # ── Raw bytes ────────────────────────────────────────────────────────────

    @property
    def byte1(self) -> int:
        return self.data[0]

    @byte1.setter
    def byte1(self, b: int) -> None:
        self.data[0] = b

    @property
    def byte2(self) -> int:
        return self.data[1]

    @byte2.setter
    def byte2(self, b: int) -> None:
        self.data[1] = b

    @property
    def byte3(self) -> int:
        return self.data[2]

    @byte3.setter
    def byte3(self, b: int) -> None:
        self.data[2] = b

    @property
    def byte4(self) -> int:
        return self.data[3]

    @byte4.setter
    def byte4(self, b: int) -> None:
        self.data[3] = b

    @property
    def byte5(self) -> int:
        return self.data[4]

    @byte5.setter
    def byte5(self, b: int) -> None:
        self.data[4] = b

    @property
    def byte6(self) -> int:
        return self.data[5]

    @byte6.setter
    def byte6(self, b: int) -> None:
        self.data[5] = b

    def set_status(self, s: int) -> None:
        _check_range(s, 0, 0xFF, "status")
        self.status = s

    def set_channel(self, chan: int) -> None:
        """Replace the low nibble of the status byte."""
        _check_channel(chan)
        self.status = (self.status & 0xF0) | chan

    def set_type(self, t: int) -> None:
        """Replace the high nibble of the status byte."""
        _check_range(t, 0, 0xF0, "type")
        self.status = (self.status & 0x0F) | (t & 0xF0)

    def set_data_length(self, n: int) -> None:
        _check_range(n, 0, 5, "data length")
        self.data_length = n

    # ── Field accessors ──────────────────────────────────────────────────────

    @property
    def channel(self) -> int:
        return self.status & 0x0F

    @property
    def type(self) -> int:
        return self.status & 0xF0

    @property
    def meta_type(self) -> int:
        return self.data[0]

    @property
    def note(self) -> int:
        return self.data[0]

    @property
    def velocity(self) -> int:
        return self.data[1]

    @property
    def channel_pressure(self) -> int:
        return self.data[0]

    @property
    def program(self) -> int:
        return self.data[0]

    @property
    def controller(self) -> int:
        return self.data[0]

    @property
    def controller_value(self) -> int:
        return self.data[1]

    @property
    def bender_value(self) -> int:
        return decode_bend(self.data[0], self.data[1])

    @property
    def meta_value(self) -> int:
        return (self.data[2] << 8) | self.data[1]

    @property
    def loop_number(self) -> int:
        return self.meta_value

    @property
    def time_sig_numerator(self) -> int:
        return self.data[1]

    @property
    def time_sig_denominator(self) -> int:
        return self.data[2]

    @property
    def time_sig_denominator_power(self) -> int:
        return self.data[3]

    @property
    def time_sig_midi_clocks_per_metronome(self) -> int:
        return self.data[4]

    @property
    def time_sig_32nds_per_quarter(self) -> int:
        return self.data[5]

    @property
    def key_sig_sharp_flats(self) -> int:
        v = self.data[1]
        return v - 256 if v > 127 else v

    @property
    def key_sig_major_minor(self) -> int:
        return self.data[2]

    @property
    def channel_prefix(self) -> int:
        return self.data[1]

    @property
    def sysex_urt_device_id(self) -> int:
        return self.data[1]

    @property
    def sysex_urt_sub_id(self) -> int:
        return self.data[2]

    @property
    def mtc_field(self) -> int:
        return self.data[0] >> 4

    @property
    def mtc_value(self) -> int:
        return self.data[0] & 0x0F

    @property
    def song_position(self) -> int:
        return (self.data[1] << 7) | self.data[0]

    @property
    def song_number(self) -> int:
        return self.data[0]

    @property
    def tempo(self) -> int:
        """Tempo in microseconds per beat; 500000 (120 BPM) when unset."""
        raw = (self.data[1] << 16) | (self.data[2] << 8) | self.data[3]
        return raw or DEFAULT_TEMPO_US

    @property
    def tempo32(self) -> int:
        """Tempo in beats per minute times 32."""
        return _TEMPO32_FACTOR // self.tempo

    @property
    def pan(self) -> float:
        """Pan position: -1.0 hard left, about 0.0 centre, 1.0 hard right."""
        return self.data[1] * 2.0 / 127.0 - 1.0

    def get_length(self) -> int:
        """Number of bytes this message occupies when encoded.

        Meta events count the status, the type byte and ``data_length``
        payload bytes.  Sysex starts count only the start byte, universal real
        time ones included: the bytes kept in ``data`` describe the body and
        are not counted.
        """
        if 0x80 <= self.status < 0xF0:
            return CHANNEL_MSG_LENGTH[(self.status >> 4) - 8]
        if self.status == SystemStatus.META_EVENT:
            return 2 + self.data_length
        if self.status >= 0xF0:
            return SYSTEM_MSG_LENGTH[self.status & 0x0F]
        return 0

    # ── Classification ───────────────────────────────────────────────────────

    def is_service_msg(self) -> bool:
        return False

    def is_no_op(self) -> bool:
        return False

    def is_beat_marker(self) -> bool:
        return False

    def is_user_app_marker(self) -> bool:
        return False

    def is_channel_msg(self) -> bool:
        return 0x80 <= self.status < 0xF0

    def is_note_on(self) -> bool:
        return self.type == ChannelType.NOTE_ON

    def is_note_off(self) -> bool:
        return self.type == ChannelType.NOTE_OFF

    def is_note_on_v0(self) -> bool:
        return self.is_note_on() and self.velocity == 0

    def is_note(self) -> bool:
        return self.is_note_on() or self.is_note_off()

    def implicit_is_note_on(self) -> bool:
        return self.is_note_on() and self.velocity != 0

    def implicit_is_note_off(self) -> bool:
        return self.is_note_off() or self.is_note_on_v0()

    def is_poly_pressure(self) -> bool:
        return self.type == ChannelType.POLY_PRESSURE

    def is_control_change(self) -> bool:
        return self.type == ChannelType.CONTROL_CHANGE

    def is_volume_change(self) -> bool:
        return self.is_control_change() and self.controller == Controller.MAIN_VOLUME

    def is_pedal_on(self) -> bool:
        return (
            self.is_control_change()
            and self.controller == Controller.DAMPER
            and bool(self.controller_value & 0x40)
        )

    def is_pedal_off(self) -> bool:
        return (
            self.is_control_change()
            and self.controller == Controller.DAMPER
            and not self.controller_value & 0x40
        )

    def is_pan_change(self) -> bool:
        return self.is_control_change() and self.controller == Controller.PAN

    def is_all_notes_off(self) -> bool:
        return self.is_control_change() and self.controller >= Controller.ALL_NOTES_OFF

    def is_program_change(self) -> bool:
        return self.type == ChannelType.PROGRAM_CHANGE

    def is_channel_pressure(self) -> bool:
        return self.type == ChannelType.CHANNEL_PRESSURE

    def is_pitch_bend(self) -> bool:
        return self.type == ChannelType.PITCH_BEND

    def is_system_message(self) -> bool:
        return self.type == 0xF0

    def is_sysex_n(self) -> bool:
        return self.status == SystemStatus.SYSEX_START_N

    def is_sysex_a(self) -> bool:
        return self.status == SystemStatus.SYSEX_START_A

    def is_system_exclusive(self) -> bool:
        """True for both the normal and the authorization sysex start."""
        return self.is_sysex_n() or self.is_sysex_a()

    def is_sysex_urt(self) -> bool:
        return self.is_sysex_n() and self.data[0] == SYSEX_URT_ID

    def is_mtc(self) -> bool:
        return self.status == SystemStatus.MTC

    def is_song_position(self) -> bool:
        return self.status == SystemStatus.SONG_POSITION

    def is_song_select(self) -> bool:
        return self.status == SystemStatus.SONG_SELECT

    def is_tune_request(self) -> bool:
        return self.status == SystemStatus.TUNE_REQUEST

    def is_meta_event(self) -> bool:
        return self.status == SystemStatus.META_EVENT

    def is_text_event(self) -> bool:
        return self.is_meta_event() and self.meta_type in TEXT_META_TYPES

    def is_lyric_text(self) -> bool:
        return self.is_text_event() and self.meta_type == MetaType.LYRIC_TEXT

    def is_track_name(self) -> bool:
        return self.is_text_event() and self.meta_type == MetaType.TRACK_NAME

    def is_marker_text(self) -> bool:
        return self.is_text_event() and self.meta_type == MetaType.MARKER_TEXT

    def is_channel_prefix(self) -> bool:
        return self.is_meta_event() and self.meta_type == MetaType.CHANNEL_PREFIX

    def is_tempo(self) -> bool:
        return self.is_meta_event() and self.meta_type == MetaType.TEMPO

    def is_end_of_track(self) -> bool:
        return self.is_meta_event() and self.meta_type == MetaType.END_OF_TRACK

    is_data_end = is_end_of_track

    def is_time_sig(self) -> bool:
        return self.is_meta_event() and self.meta_type == MetaType.TIMESIG

    def is_key_sig(self) -> bool:
        return self.is_meta_event() and self.meta_type == MetaType.KEYSIG

    # ── Field mutators ───────────────────────────────────────────────────────

    def set_note(self, n: int) -> None:
        _check_7bit(n, "note")
        self.data[0] = n

    def set_velocity(self, v: int) -> None:
        _check_7bit(v, "velocity")
        self.data[1] = v

    def set_program(self, v: int) -> None:
        _check_7bit(v, "program")
        self.data[0] = v

    def set_controller(self, c: int) -> None:
        _check_7bit(c, "controller")
        self.data[0] = c

    def set_controller_value(self, v: int) -> None:
        _check_7bit(v, "controller value")
        self.data[1] = v

    def set_bender_value(self, v: int) -> None:
        self.data[0], self.data[1] = encode_bend(v)

    def set_meta_type(self, t: int) -> None:
        _check_range(t, 0, 0x7F, "meta type")
        self.data[0] = t

    def set_meta_value(self, v: int) -> None:
        _check_range(v, 0, 0xFFFF, "meta value")
        self.data[1] = v & 0xFF
        self.data[2] = (v >> 8) & 0xFF

    # ── Channel messages ─────────────────────────────────────────────────────

    def _set_channel_msg(self, kind: ChannelType, chan: int) -> None:
        _check_channel(chan)
        self.clear()
        self.status = kind | chan

    def set_note_on(self, chan: int, note: int, vel: int) -> None:
        self._set_channel_msg(ChannelType.NOTE_ON, chan)
        self.set_note(note)
        self.set_velocity(vel)

    def set_note_off(self, chan: int, note: int, vel: int = 0) -> None:
        self._set_channel_msg(ChannelType.NOTE_OFF, chan)
        self.set_note(note)
        self.set_velocity(vel)

    def set_poly_pressure(self, chan: int, note: int, pres: int) -> None:
        self._set_channel_msg(ChannelType.POLY_PRESSURE, chan)
        self.set_note(note)
        _check_7bit(pres, "pressure")
        self.data[1] = pres

    def set_control_change(self, chan: int, ctrl: int, val: int) -> None:
        self._set_channel_msg(ChannelType.CONTROL_CHANGE, chan)
        self.set_controller(ctrl)
        self.set_controller_value(val)

    def set_pan(self, chan: int, pan: float) -> None:
        """Pan control change; ``pan`` runs from -1.0 (left) to 1.0 (right)."""
        if not -1.0 <= pan <= 1.0:
            raise ValueError(f"pan must be in [-1.0, 1.0], got {pan!r}")
        value = int(round((pan + 1.0) * 127.0 / 2.0))
        self.set_control_change(chan, Controller.PAN, value)

    def set_program_change(self, chan: int, val: int) -> None:
        self._set_channel_msg(ChannelType.PROGRAM_CHANGE, chan)
        self.set_program(val)

    def set_channel_pressure(self, chan: int, val: int) -> None:
        self._set_channel_msg(ChannelType.CHANNEL_PRESSURE, chan)
        _check_7bit(val, "pressure")
        self.data[0] = val

    def set_pitch_bend(self, chan: int, val: int) -> None:
        self._set_channel_msg(ChannelType.PITCH_BEND, chan)
        self.set_bender_value(val)

    def set_pitch_bend_bytes(self, chan: int, low: int, high: int) -> None:
        self._set_channel_msg(ChannelType.PITCH_BEND, chan)
        _check_7bit(low, "bend low byte")
        _check_7bit(high, "bend high byte")
        self.data[0] = low
        self.data[1] = high

    def set_all_notes_off(
        self, chan: int, kind: int = Controller.ALL_NOTES_OFF, mode: int = 0
    ) -> None:
        _check_range(kind, Controller.ALL_NOTES_OFF, 0x7F, "channel mode controller")
        self.set_control_change(chan, kind, mode)

    def set_local(self, chan: int, v: int) -> None:
        self.set_control_change(chan, Controller.LOCAL, v)

    # ── System messages ──────────────────────────────────────────────────────

    def set_sysex(self, kind: int = SystemStatus.SYSEX_START_N) -> None:
        if kind not in (SystemStatus.SYSEX_START_N, SystemStatus.SYSEX_START_A):
            raise ValueError(f"sysex start must be 0xF0 or 0xF7, got {kind!r}")
        self.clear()
        self.status = kind

    def set_sysex_urt(self, device_id: int, sub_id: int, *data: int) -> None:
        """Universal real time sysex carried entirely inside the value."""
        _check_7bit(device_id, "device id")
        _check_7bit(sub_id, "sub id")
        if len(data) > 3:
            raise ValueError(f"at most 3 URT data bytes fit, got {len(data)}")
        for b in data:
            _check_7bit(b, "URT data byte")
        self.set_sysex(SystemStatus.SYSEX_START_N)
        self.data[0] = SYSEX_URT_ID
        self.data[1] = device_id
        self.data[2] = sub_id
        self.data[3:3 + len(data)] = bytes(data)
        self.data_length = 2 + len(data)

    def set_mtc(self, frame_type: int, v: int) -> None:
        _check_range(frame_type, 0, 7, "MTC field")
        _check_range(v, 0, 15, "MTC value")
        self.clear()
        self.status = SystemStatus.MTC
        self.data[0] = (frame_type << 4) | v

    def set_song_position(self, pos: int) -> None:
        _check_range(pos, 0, 0x3FFF, "song position")
        self.clear()
        self.status = SystemStatus.SONG_POSITION
        self.data[0] = pos & 0x7F
        self.data[1] = (pos >> 7) & 0x7F

    def set_song_select(self, sng: int) -> None:
        _check_7bit(sng, "song")
        self.clear()
        self.status = SystemStatus.SONG_SELECT
        self.data[0] = sng

    def set_tune_request(self) -> None:
        self.clear()
        self.status = SystemStatus.TUNE_REQUEST

    # ── Meta events ──────────────────────────────────────────────────────────

    def _set_meta(self, meta_type: int) -> None:
        self.clear()
        self.status = SystemStatus.META_EVENT
        self.set_meta_type(meta_type)

    def set_meta_event(self, meta_type: int, v1: int, v2: int) -> None:
        _check_range(v1, 0, 0xFF, "meta byte")
        _check_range(v2, 0, 0xFF, "meta byte")
        self._set_meta(meta_type)
        self.data[1] = v1
        self.data[2] = v2
        self.data_length = 2

    def set_meta_event_value(self, meta_type: int, v: int) -> None:
        self._set_meta(meta_type)
        self.set_meta_value(v)
        self.data_length = 2

    def set_tempo(self, tempo: int) -> None:
        """Tempo meta event from microseconds per beat."""
        _check_range(tempo, 1, MAX_TEMPO_US, "tempo")
        self._set_meta(MetaType.TEMPO)
        self.data[1] = (tempo >> 16) & 0xFF
        self.data[2] = (tempo >> 8) & 0xFF
        self.data[3] = tempo & 0xFF
        self.data_length = 3

    def set_tempo32(self, tempo_times_32: int) -> None:
        """Tempo meta event from beats per minute times 32."""
        if tempo_times_32 <= 0:
            raise ValueError(f"tempo32 must be positive, got {tempo_times_32!r}")
        tempo = (_TEMPO32_FACTOR + tempo_times_32 // 2) // tempo_times_32
        self.set_tempo(tempo)

    def set_text(self, text_num: int, meta_type: int = MetaType.GENERIC_TEXT) -> None:
        """Text meta event; the text itself lives in a table at ``text_num``."""
        if meta_type not in TEXT_META_TYPES:
            raise ValueError(f"not a text meta type: {meta_type!r}")
        self.set_meta_event_value(meta_type, text_num)

    def set_end_of_track(self) -> None:
        self._set_meta(MetaType.END_OF_TRACK)

    set_data_end = set_end_of_track

    def set_time_sig(
        self,
        numerator: int = 4,
        denominator_power: int = 2,
        midi_clocks_per_metronome: int = 24,
        num_32nd_per_midi_quarter_note: int = 8,
    ) -> None:
        _check_range(numerator, 1, 0xFF, "numerator")
        _check_range(denominator_power, 0, 7, "denominator power")
        _check_range(midi_clocks_per_metronome, 0, 0xFF, "clocks per metronome")
        _check_range(num_32nd_per_midi_quarter_note, 0, 0xFF, "32nds per quarter")
        self._set_meta(MetaType.TIMESIG)
        self.data[1] = numerator
        self.data[2] = 1 << denominator_power
        self.data[3] = denominator_power
        self.data[4] = midi_clocks_per_metronome
        self.data[5] = num_32nd_per_midi_quarter_note
        self.data_length = 5

    def set_key_sig(self, sharp_flats: int, major_minor: int) -> None:
        _check_range(sharp_flats, -7, 7, "sharps/flats")
        _check_range(major_minor, 0, 1, "major/minor")
        self._set_meta(MetaType.KEYSIG)
        self.data[1] = sharp_flats & 0xFF
        self.data[2] = major_minor
        self.data_length = 2

    def set_channel_prefix(self, chan: int) -> None:
        _check_channel(chan)
        self._set_meta(MetaType.CHANNEL_PREFIX)
        self.data[1] = chan
        self.data_length = 1

    # ── Text rendering ───────────────────────────────────────────────────────

    def to_text(self) -> str:
        if self.is_channel_msg():
            return self._channel_text()
        if self.is_meta_event():
            return self._meta_text()
        if self.is_sysex_urt():
            return (
                f"SYSEX URT dev={self.sysex_urt_device_id} sub={self.sysex_urt_sub_id} "
                f"len={self.data_length}"
            )
        if self.is_mtc():
            return f"MTC field={self.mtc_field} value={self.mtc_value}"
        if self.is_song_position():
            return f"SONG POS {self.song_position}"
        if self.is_song_select():
            return f"SONG SELECT {self.song_number}"
        name = SYSTEM_MSG_NAMES.get(self.status)
        if name is not None:
            return name
        return f"STATUS 0x{self.status:02X}"

    def _channel_text(self) -> str:
        head = f"Ch {self.channel + 1:2d} {CHANNEL_MSG_NAMES[self.type]:<11}"
        if self.is_note() or self.is_poly_pressure():
            return f"{head} note={self.note:3d} vel={self.velocity:3d}"
        if self.is_control_change():
            return f"{head} ctrl={self.controller:3d} val={self.controller_value:3d}"
        if self.is_program_change():
            return f"{head} prog={self.program:3d}"
        if self.is_channel_pressure():
            return f"{head} pres={self.channel_pressure:3d}"
        return f"{head} bend={self.bender_value:+d}"

    def _meta_text(self) -> str:
        name = META_NAMES.get(self.meta_type, f"META 0x{self.meta_type:02X}")
        if self.is_tempo():
            return f"TEMPO {self.tempo32 / 32:.2f} BPM ({self.tempo} us)"
        if self.is_time_sig():
            return (
                f"TIME SIG {self.time_sig_numerator}/{self.time_sig_denominator} "
                f"clocks={self.time_sig_midi_clocks_per_metronome} "
                f"32nds={self.time_sig_32nds_per_quarter}"
            )
        if self.is_key_sig():
            sf = self.key_sig_sharp_flats
            accidentals = f"{abs(sf)} {'flats' if sf < 0 else 'sharps'}"
            mode = "minor" if self.key_sig_major_minor else "major"
            return f"KEY SIG {accidentals} {mode}"
        if self.is_text_event():
            return f"{name} #{self.meta_value}"
        if self.is_channel_prefix():
            return f"{name} {self.channel_prefix + 1}"
        if self.is_end_of_track():
            return name
        payload = " ".join(f"{b:02X}" for b in self.data[1:1 + self.data_length])
        return f"{name} {payload}".rstrip()

    def __str__(self) -> str:
        return self.to_text()
