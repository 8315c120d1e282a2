from .constants import ChannelType, Controller, MetaType, SystemStatus
from .event import AbsoluteTime, DeltaTime, MidiEvent
from .message import MidiMessage, ServiceKind, ServiceMarker, decode_bend, encode_bend
from .ordering import (
    InsertMode,
    InsertOrder,
    compare_events,
    compare_events_for_insert,
    insert_event,
    is_same_kind,
    to_absolute,
    to_delta,
)
from .sysex import SysExBuffer

__all__ = [
    "AbsoluteTime",
    "ChannelType",
    "Controller",
    "DeltaTime",
    "InsertMode",
    "InsertOrder",
    "MetaType",
    "MidiEvent",
    "MidiMessage",
    "ServiceKind",
    "ServiceMarker",
    "SysExBuffer",
    "SystemStatus",
    "compare_events",
    "compare_events_for_insert",
    "decode_bend",
    "encode_bend",
    "insert_event",
    "is_same_kind",
    "to_absolute",
    "to_delta",
]
