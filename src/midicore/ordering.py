"""Ordering law for merging events into a time-ordered sequence.

``compare_events_for_insert`` applies its tie-break rules strictly in this
order.  Each rule decides only when exactly one of the two events matches it;
when both match, the pair is indifferent.

1. a no-op marker goes after everything
2. the earlier time goes first
3. end of track goes after everything at the same time
4. a meta event goes before a non meta event
5. a system exclusive message goes after a non exclusive event
6. between two channel messages the lower channel goes first
7. a non note message goes before a note message
8. a note off (or note on with velocity 0) goes before a note on

Changing the order of the rules changes how tracks merge.
"""
from __future__ import annotations

import logging
from enum import Enum, IntEnum
from typing import Callable, Sequence

from .event import AbsoluteTime, DeltaTime, MidiEvent

logger = logging.getLogger(__name__)


class InsertOrder(IntEnum):
    INDIFFERENT = 0
    A_BEFORE_B = 1
    A_AFTER_B = 2


class InsertMode(Enum):
    INSERT = "insert"
    REPLACE = "replace"
    INSERT_OR_REPLACE = "insert_or_replace"


def compare_events(a: MidiEvent, b: MidiEvent) -> int:
    """Plain chronological comparison: negative, zero or positive."""
    return a.abs_time - b.abs_time


def _first_matching(
    a: MidiEvent, b: MidiEvent, predicate: Callable[[MidiEvent], bool], *, first: bool
) -> InsertOrder | None:
    # ``first`` says whether the matching event goes first or last.
    in_a = predicate(a)
    in_b = predicate(b)
    if in_a and in_b:
        return InsertOrder.INDIFFERENT
    if in_a:
        return InsertOrder.A_BEFORE_B if first else InsertOrder.A_AFTER_B
    if in_b:
        return InsertOrder.A_AFTER_B if first else InsertOrder.A_BEFORE_B
    return None


def _is_no_op(e: MidiEvent) -> bool:
    return e.is_no_op()


def _is_end_of_track(e: MidiEvent) -> bool:
    return e.protocol is not None and e.protocol.is_end_of_track()


def _is_meta(e: MidiEvent) -> bool:
    return e.protocol is not None and e.protocol.is_meta_event()


def _is_sysex(e: MidiEvent) -> bool:
    return e.protocol is not None and e.protocol.is_system_exclusive()


def _is_channel(e: MidiEvent) -> bool:
    return e.protocol is not None and e.protocol.is_channel_msg()


def _is_not_note(e: MidiEvent) -> bool:
    return e.protocol is None or not e.protocol.is_note()


def _is_note_off(e: MidiEvent) -> bool:
    return e.protocol is not None and e.protocol.implicit_is_note_off()


def compare_events_for_insert(a: MidiEvent, b: MidiEvent) -> InsertOrder:
    verdict = _first_matching(a, b, _is_no_op, first=False)
    if verdict is not None:
        return verdict

    if a.abs_time < b.abs_time:
        return InsertOrder.A_BEFORE_B
    if a.abs_time > b.abs_time:
        return InsertOrder.A_AFTER_B

    for predicate, first in (
        (_is_end_of_track, False),
        (_is_meta, True),
        (_is_sysex, False),
    ):
        verdict = _first_matching(a, b, predicate, first=first)
        if verdict is not None:
            return verdict

    if _is_channel(a) and _is_channel(b):
        chan_a = a.protocol.channel
        chan_b = b.protocol.channel
        if chan_a < chan_b:
            return InsertOrder.A_BEFORE_B
        if chan_a > chan_b:
            return InsertOrder.A_AFTER_B

    for predicate, first in (
        (_is_not_note, True),
        (_is_note_off, True),
    ):
        verdict = _first_matching(a, b, predicate, first=first)
        if verdict is not None:
            return verdict

    return InsertOrder.INDIFFERENT


def is_same_kind(a: MidiEvent, b: MidiEvent) -> bool:
    """True when inserting ``b`` where ``a`` sits should replace ``a``."""
    if a.abs_time != b.abs_time:
        return False

    pa = a.protocol
    pb = b.protocol
    if pa is None or pb is None:
        # Service markers only match markers of the same kind.
        return pa is None and pb is None and a.message.kind == b.message.kind

    if pa.is_channel_msg() and pb.is_channel_msg():
        if pa.channel != pb.channel or pa.type != pb.type:
            return False
        if pa.is_note() or pa.is_control_change():
            # note number for notes, controller number for control changes
            return pa.byte1 == pb.byte1
        return True

    if pa.is_meta_event() and pb.is_meta_event():
        return pa.meta_type == pb.meta_type

    if pa.is_channel_msg() or pb.is_channel_msg():
        return False
    if pa.is_meta_event() or pb.is_meta_event():
        return False
    return pa.status == pb.status


# ── Sequence helpers ─────────────────────────────────────────────────────────


def find_insert_position(events: Sequence[MidiEvent], event: MidiEvent) -> int:
    """Index right after the last event that ``event`` does not precede.

    The search walks back from the end, so appending in time order touches
    only the tail of the track.
    """
    i = len(events)
    while i > 0 and compare_events_for_insert(event, events[i - 1]) is InsertOrder.A_BEFORE_B:
        i -= 1
    return i


def find_same_kind(events: Sequence[MidiEvent], event: MidiEvent) -> int | None:
    for i, existing in enumerate(events):
        if is_same_kind(existing, event):
            return i
    return None


def insert_event(
    events: list[MidiEvent], event: MidiEvent, mode: InsertMode = InsertMode.INSERT
) -> bool:
    """Insert a copy of ``event`` into the sorted list ``events``.

    Returns ``False`` only in ``REPLACE`` mode when no event of the same kind
    exists at that time; the list is then left untouched.
    """
    if mode is not InsertMode.INSERT:
        idx = find_same_kind(events, event)
        if idx is not None:
            logger.debug("replacing event %d (%s) with %s", idx, events[idx], event)
            events[idx] = event.copy()
            return True
        if mode is InsertMode.REPLACE:
            logger.debug("no event of the same kind as %s to replace", event)
            return False

    pos = find_insert_position(events, event)
    events.insert(pos, event.copy())
    return True


def to_absolute(events: Sequence[MidiEvent]) -> list[MidiEvent]:
    """Copies of ``events`` with delta stamps turned into absolute ones."""
    result = []
    now = 0
    for event in events:
        if isinstance(event.time, AbsoluteTime):
            raise TypeError("events already carry absolute time stamps")
        if event.time is not None:
            now += event.time.ticks
        converted = event.copy()
        converted.time = AbsoluteTime(now)
        result.append(converted)
    return result


def to_delta(events: Sequence[MidiEvent]) -> list[MidiEvent]:
    """Copies of ``events`` with absolute stamps turned into deltas."""
    result = []
    previous = 0
    for event in events:
        if isinstance(event.time, DeltaTime):
            raise TypeError("events already carry delta time stamps")
        now = event.abs_time
        if now < previous:
            raise ValueError(f"events are not in time order at tick {now}")
        converted = event.copy()
        converted.time = DeltaTime(now - previous)
        result.append(converted)
        previous = now
    return result
