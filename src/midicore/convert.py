"""Bridge between mido messages and :class:`~midicore.event.MidiEvent`.

mido owns the byte stream; this module only maps its message objects onto
the packed value and back.  Text meta events keep their text in a
caller-supplied table; the message stores the table index.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator

import mido

from .constants import MetaType, SystemStatus
from .event import DeltaTime, MidiEvent
from .message import MidiMessage

logger = logging.getLogger(__name__)

TEXT_TYPES = {
    "text": MetaType.GENERIC_TEXT,
    "copyright": MetaType.COPYRIGHT,
    "track_name": MetaType.TRACK_NAME,
    "instrument_name": MetaType.INSTRUMENT_NAME,
    "lyrics": MetaType.LYRIC_TEXT,
    "marker": MetaType.MARKER_TEXT,
    "cue_marker": MetaType.CUE_POINT,
}

# mido keeps the text of these two in ``name``
_NAME_ATTR_TYPES = {"track_name", "instrument_name"}

_TEXT_TYPE_NAMES = {v: k for k, v in TEXT_TYPES.items()}

MAJOR_KEYS = ("Cb", "Gb", "Db", "Ab", "Eb", "Bb", "F", "C", "G", "D", "A", "E", "B", "F#", "C#")
MINOR_KEYS = tuple(
    k + "m" for k in ("Ab", "Eb", "Bb", "F", "C", "G", "D", "A", "E", "B", "F#", "C#", "G#", "D#", "A#")
)


def key_to_sharp_flats(key: str) -> tuple[int, int]:
    """mido key name (``"Bb"``, ``"F#m"``) to ``(sharp_flats, major_minor)``."""
    if key in MAJOR_KEYS:
        return MAJOR_KEYS.index(key) - 7, 0
    if key in MINOR_KEYS:
        return MINOR_KEYS.index(key) - 7, 1
    raise ValueError(f"unknown key signature: {key!r}")


def sharp_flats_to_key(sharp_flats: int, major_minor: int) -> str:
    keys = MINOR_KEYS if major_minor else MAJOR_KEYS
    return keys[sharp_flats + 7]


def _store_text(texts: list[str] | None, text: str) -> int:
    if texts is None:
        logger.debug("no text table given, dropping %r", text)
        return 0
    texts.append(text)
    return len(texts) - 1


def from_mido(msg: mido.Message | mido.MetaMessage, texts: list[str] | None = None) -> MidiEvent:
    """Convert one mido message; ``msg.time`` becomes the delta time."""
    m = MidiMessage()
    sysex_data = None
    t = msg.type

    if t == "note_on":
        m.set_note_on(msg.channel, msg.note, msg.velocity)
    elif t == "note_off":
        m.set_note_off(msg.channel, msg.note, msg.velocity)
    elif t == "polytouch":
        m.set_poly_pressure(msg.channel, msg.note, msg.value)
    elif t == "control_change":
        m.set_control_change(msg.channel, msg.control, msg.value)
    elif t == "program_change":
        m.set_program_change(msg.channel, msg.program)
    elif t == "aftertouch":
        m.set_channel_pressure(msg.channel, msg.value)
    elif t == "pitchwheel":
        m.set_pitch_bend(msg.channel, msg.pitch)
    elif t == "sysex":
        m.set_sysex(SystemStatus.SYSEX_START_N)
        sysex_data = bytes(msg.data)
    elif t == "quarter_frame":
        m.set_mtc(msg.frame_type, msg.frame_value)
    elif t == "songpos":
        m.set_song_position(msg.pos)
    elif t == "song_select":
        m.set_song_select(msg.song)
    elif t == "tune_request":
        m.set_tune_request()
    elif t in TEXT_TYPES:
        text = msg.name if t in _NAME_ATTR_TYPES else msg.text
        m.set_text(_store_text(texts, text), TEXT_TYPES[t])
    elif t == "set_tempo":
        m.set_tempo(msg.tempo)
    elif t == "time_signature":
        denominator = msg.denominator
        if denominator <= 0 or denominator & (denominator - 1):
            raise ValueError(f"time signature denominator is not a power of two: {denominator}")
        m.set_time_sig(
            msg.numerator,
            denominator.bit_length() - 1,
            msg.clocks_per_click,
            msg.notated_32nd_notes_per_beat,
        )
    elif t == "key_signature":
        m.set_key_sig(*key_to_sharp_flats(msg.key))
    elif t == "end_of_track":
        m.set_end_of_track()
    elif t == "channel_prefix":
        m.set_channel_prefix(msg.channel)
    elif t == "sequence_number":
        m.set_meta_event_value(MetaType.SEQUENCE_NUMBER, msg.number)
    else:
        raise ValueError(f"unsupported mido message type: {t}")

    event = MidiEvent(m, time=DeltaTime(int(msg.time)))
    if sysex_data is not None:
        event.attach_sysex(sysex_data)
    return event


def to_mido(
    event: MidiEvent, texts: list[str] | None = None
) -> mido.Message | mido.MetaMessage:
    """Convert back to mido; only a delta stamp is carried over as ``time``."""
    m = event.protocol
    if m is None:
        raise ValueError(f"service markers have no MIDI form: {event.message.to_text()}")
    time = event.time.ticks if isinstance(event.time, DeltaTime) else 0

    if m.is_channel_msg():
        ch = m.channel
        if m.is_note_on():
            return mido.Message("note_on", channel=ch, note=m.note, velocity=m.velocity, time=time)
        if m.is_note_off():
            return mido.Message("note_off", channel=ch, note=m.note, velocity=m.velocity, time=time)
        if m.is_poly_pressure():
            return mido.Message("polytouch", channel=ch, note=m.note, value=m.velocity, time=time)
        if m.is_control_change():
            return mido.Message(
                "control_change", channel=ch, control=m.controller, value=m.controller_value, time=time
            )
        if m.is_program_change():
            return mido.Message("program_change", channel=ch, program=m.program, time=time)
        if m.is_channel_pressure():
            return mido.Message("aftertouch", channel=ch, value=m.channel_pressure, time=time)
        return mido.Message("pitchwheel", channel=ch, pitch=m.bender_value, time=time)

    if m.is_system_exclusive():
        data = event.sysex_bytes() or b""
        return mido.Message("sysex", data=data, time=time)
    if m.is_mtc():
        return mido.Message("quarter_frame", frame_type=m.mtc_field, frame_value=m.mtc_value, time=time)
    if m.is_song_position():
        return mido.Message("songpos", pos=m.song_position, time=time)
    if m.is_song_select():
        return mido.Message("song_select", song=m.song_number, time=time)
    if m.is_tune_request():
        return mido.Message("tune_request", time=time)

    if m.is_text_event():
        name = _TEXT_TYPE_NAMES.get(m.meta_type, "text")
        idx = m.meta_value
        text = texts[idx] if texts is not None and idx < len(texts) else ""
        if name in _NAME_ATTR_TYPES:
            return mido.MetaMessage(name, name=text, time=time)
        return mido.MetaMessage(name, text=text, time=time)
    if m.is_tempo():
        return mido.MetaMessage("set_tempo", tempo=m.tempo, time=time)
    if m.is_time_sig():
        return mido.MetaMessage(
            "time_signature",
            numerator=m.time_sig_numerator,
            denominator=m.time_sig_denominator,
            clocks_per_click=m.time_sig_midi_clocks_per_metronome,
            notated_32nd_notes_per_beat=m.time_sig_32nds_per_quarter,
            time=time,
        )
    if m.is_key_sig():
        key = sharp_flats_to_key(m.key_sig_sharp_flats, m.key_sig_major_minor)
        return mido.MetaMessage("key_signature", key=key, time=time)
    if m.is_end_of_track():
        return mido.MetaMessage("end_of_track", time=time)
    if m.is_channel_prefix():
        return mido.MetaMessage("channel_prefix", channel=m.channel_prefix, time=time)
    if m.is_meta_event() and m.meta_type == MetaType.SEQUENCE_NUMBER:
        return mido.MetaMessage("sequence_number", number=m.meta_value, time=time)

    raise ValueError(f"no mido form for {m.to_text()}")


def convert_track(
    messages: Iterable[mido.Message | mido.MetaMessage], texts: list[str] | None = None
) -> Iterator[MidiEvent]:
    """Convert a mido track, skipping unsupported messages.

    The delta time of a skipped message is carried into the next event so
    absolute positions stay correct.
    """
    carry = 0
    for msg in messages:
        try:
            event = from_mido(msg, texts)
        except ValueError as e:
            logger.debug("skipping %s: %s", msg, e)
            carry += int(msg.time)
            continue
        if carry:
            event.set_delta_time(event.delta_time + carry)
            carry = 0
        yield event
