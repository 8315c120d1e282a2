"""Tests for the insert ordering law and the same-kind relation."""
from __future__ import annotations

import itertools
from functools import cmp_to_key

import pytest

from midicore import ordering
from midicore.constants import MetaType, SystemStatus
from midicore.event import AbsoluteTime, DeltaTime, MidiEvent
from midicore.message import ServiceMarker
from midicore.ordering import (
    InsertMode,
    InsertOrder,
    compare_events,
    compare_events_for_insert,
    find_insert_position,
    insert_event,
    is_same_kind,
    to_absolute,
    to_delta,
)

BEFORE = InsertOrder.A_BEFORE_B
AFTER = InsertOrder.A_AFTER_B
INDIFFERENT = InsertOrder.INDIFFERENT


def note_on(t: int, ch: int, note: int, vel: int = 90) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_note_on(ch, note, vel)
    return e


def note_off(t: int, ch: int, note: int) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_note_off(ch, note)
    return e


def cc(t: int, ch: int, ctrl: int, val: int = 64) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_control_change(ch, ctrl, val)
    return e


def program(t: int, ch: int, value: int) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_program_change(ch, value)
    return e


def bend(t: int, ch: int, value: int) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_pitch_bend(ch, value)
    return e


def tempo(t: int, us: int = 500_000) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_tempo(us)
    return e


def time_sig(t: int) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_time_sig(3, 2)
    return e


def text(t: int, num: int = 0) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_text(num, MetaType.MARKER_TEXT)
    return e


def end_of_track(t: int) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_end_of_track()
    return e


def sysex(t: int, kind: int = SystemStatus.SYSEX_START_N) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_sysex(kind)
    e.attach_sysex(b"\x7E\x7F\x09\x01")
    return e


def song_select(t: int, song: int = 1) -> MidiEvent:
    e = MidiEvent.at(t)
    e.protocol.set_song_select(song)
    return e


def marker(t: int, service: ServiceMarker) -> MidiEvent:
    return MidiEvent(service, time=AbsoluteTime(t))


def _pool() -> list[MidiEvent]:
    events = []
    for t in (0, 50):
        events += [
            note_on(t, 0, 64),
            note_on(t, 0, 64, 0),
            note_on(t, 3, 60),
            note_off(t, 0, 64),
            note_off(t, 3, 60),
            cc(t, 0, 7),
            cc(t, 0, 10),
            cc(t, 3, 7),
            program(t, 0, 5),
            program(t, 0, 6),
            bend(t, 1, 100),
            tempo(t),
            tempo(t, 600_000),
            time_sig(t),
            text(t),
            end_of_track(t),
            sysex(t),
            sysex(t, SystemStatus.SYSEX_START_A),
            song_select(t),
            marker(t, ServiceMarker.no_op()),
            marker(t, ServiceMarker.beat_marker()),
            marker(t, ServiceMarker.user_app_marker()),
        ]
    return events


class TestCompareEvents:

    def test_by_time_only(self) -> None:
        assert compare_events(note_on(10, 0, 60), end_of_track(20)) < 0
        assert compare_events(end_of_track(20), note_on(10, 0, 60)) > 0
        assert compare_events(end_of_track(20), note_on(20, 0, 60)) == 0

    def test_requires_absolute_time(self) -> None:
        a = note_on(0, 0, 60)
        a.time = DeltaTime(0)
        with pytest.raises(TypeError):
            compare_events(a, note_on(0, 0, 60))

    def test_sorted_is_stable_on_ties(self) -> None:
        events = [note_on(5, 0, 60), tempo(0), note_off(5, 0, 60), text(0)]
        ordered = sorted(events, key=cmp_to_key(compare_events))
        assert ordered == [events[1], events[3], events[0], events[2]]


class TestInsertRules:

    def test_no_op_after_everything(self) -> None:
        noop = marker(0, ServiceMarker.no_op())
        assert compare_events_for_insert(noop, note_on(100, 0, 60)) is AFTER
        assert compare_events_for_insert(end_of_track(100), noop) is BEFORE

    def test_two_no_ops_indifferent(self) -> None:
        a = marker(0, ServiceMarker.no_op())
        b = marker(10, ServiceMarker.no_op())
        assert compare_events_for_insert(a, b) is INDIFFERENT

    def test_earlier_time_first(self) -> None:
        assert compare_events_for_insert(end_of_track(10), note_on(20, 0, 60)) is BEFORE
        assert compare_events_for_insert(note_on(20, 0, 60), sysex(10)) is AFTER

    def test_end_of_track_last_at_same_time(self) -> None:
        assert compare_events_for_insert(end_of_track(10), note_on(10, 0, 60)) is AFTER
        assert compare_events_for_insert(tempo(10), end_of_track(10)) is BEFORE

    def test_meta_before_non_meta(self) -> None:
        assert compare_events_for_insert(tempo(10), note_on(10, 0, 60)) is BEFORE
        assert compare_events_for_insert(cc(10, 0, 7), time_sig(10)) is AFTER

    def test_meta_text_before_sysex_either_way(self) -> None:
        assert compare_events_for_insert(text(10), sysex(10)) is BEFORE
        assert compare_events_for_insert(sysex(10), text(10)) is AFTER

    def test_sysex_after_non_sysex(self) -> None:
        assert compare_events_for_insert(sysex(10), note_on(10, 15, 60)) is AFTER
        assert compare_events_for_insert(song_select(10), sysex(10)) is BEFORE

    def test_authorization_sysex_also_after(self) -> None:
        auth = sysex(10, SystemStatus.SYSEX_START_A)
        assert compare_events_for_insert(auth, note_on(10, 0, 60)) is AFTER

    def test_lower_channel_first(self) -> None:
        assert compare_events_for_insert(note_on(10, 1, 60), cc(10, 3, 7)) is BEFORE
        assert compare_events_for_insert(cc(10, 3, 7), note_on(10, 1, 60)) is AFTER

    def test_control_change_before_note_on(self) -> None:
        on = note_on(100, 2, 60, 90)
        volume = cc(100, 2, 7, 64)
        assert compare_events_for_insert(volume, on) is BEFORE
        assert compare_events_for_insert(on, volume) is AFTER

    def test_non_note_before_note_across_non_channel(self) -> None:
        beat = marker(10, ServiceMarker.beat_marker())
        assert compare_events_for_insert(beat, note_on(10, 0, 60)) is BEFORE

    def test_note_off_before_note_on(self) -> None:
        off = note_off(50, 0, 64)
        on = note_on(50, 0, 64)
        assert compare_events_for_insert(off, on) is BEFORE
        assert compare_events_for_insert(on, off) is AFTER

    def test_velocity_zero_counts_as_note_off(self) -> None:
        assert compare_events_for_insert(note_on(50, 0, 64, 0), note_on(50, 0, 64, 80)) is BEFORE

    @pytest.mark.parametrize(
        "a,b",
        [
            (tempo(10), time_sig(10)),
            (sysex(10), sysex(10, SystemStatus.SYSEX_START_A)),
            (note_on(10, 0, 60), note_on(10, 0, 72)),
            (note_off(10, 0, 60), note_off(10, 0, 72)),
            (cc(10, 0, 7), program(10, 0, 1)),
            (song_select(10), song_select(10, 2)),
            (end_of_track(10), end_of_track(10)),
        ],
    )
    def test_indifferent_pairs(self, a: MidiEvent, b: MidiEvent) -> None:
        assert compare_events_for_insert(a, b) is INDIFFERENT
        assert compare_events_for_insert(b, a) is INDIFFERENT

    def test_antisymmetric(self) -> None:
        for a, b in itertools.product(_pool(), repeat=2):
            forward = compare_events_for_insert(a, b)
            backward = compare_events_for_insert(b, a)
            if forward is BEFORE:
                assert backward is AFTER, (a, b)
            elif forward is AFTER:
                assert backward is BEFORE, (a, b)
            else:
                assert backward is INDIFFERENT, (a, b)

    def test_reflexive_pairs_are_indifferent(self) -> None:
        for a in _pool():
            assert compare_events_for_insert(a, a.copy()) is INDIFFERENT


class TestSameKind:

    def test_same_note_on(self) -> None:
        assert is_same_kind(note_on(50, 0, 64, 90), note_on(50, 0, 64, 30))

    def test_note_on_vs_note_off(self) -> None:
        assert not is_same_kind(note_on(50, 0, 64), note_off(50, 0, 64))

    def test_different_note_or_channel(self) -> None:
        assert not is_same_kind(note_on(50, 0, 64), note_on(50, 0, 65))
        assert not is_same_kind(note_on(50, 0, 64), note_on(50, 1, 64))

    def test_control_change_needs_same_controller(self) -> None:
        assert is_same_kind(cc(0, 4, 7, 10), cc(0, 4, 7, 100))
        assert not is_same_kind(cc(0, 4, 7), cc(0, 4, 10))

    def test_other_channel_kinds_compare_type_and_channel(self) -> None:
        assert is_same_kind(program(0, 0, 5), program(0, 0, 6))
        assert not is_same_kind(program(0, 0, 5), program(0, 1, 5))
        assert not is_same_kind(program(0, 1, 5), bend(0, 1, 0))

    def test_meta_same_type(self) -> None:
        assert is_same_kind(tempo(0), tempo(0, 600_000))
        assert not is_same_kind(tempo(0), time_sig(0))

    def test_non_channel_same_status(self) -> None:
        assert is_same_kind(sysex(0), sysex(0))
        assert not is_same_kind(sysex(0), sysex(0, SystemStatus.SYSEX_START_A))
        assert is_same_kind(song_select(0, 1), song_select(0, 2))
        assert not is_same_kind(song_select(0), sysex(0))

    def test_meta_vs_other(self) -> None:
        assert not is_same_kind(tempo(0), sysex(0))
        assert not is_same_kind(tempo(0), cc(0, 0, 7))

    def test_service_markers(self) -> None:
        assert is_same_kind(marker(0, ServiceMarker.no_op()), marker(0, ServiceMarker.no_op()))
        assert not is_same_kind(marker(0, ServiceMarker.no_op()), marker(0, ServiceMarker.beat_marker()))
        assert not is_same_kind(marker(0, ServiceMarker.no_op()), note_on(0, 0, 60))

    def test_different_time_never_same(self) -> None:
        for a, b in itertools.product(_pool(), repeat=2):
            if a.abs_time != b.abs_time:
                assert not is_same_kind(a, b)

    def test_reflexive_and_symmetric(self) -> None:
        pool = _pool()
        for a in pool:
            assert is_same_kind(a, a)
        for a, b in itertools.product(pool, repeat=2):
            assert is_same_kind(a, b) == is_same_kind(b, a)


class TestInsertEvent:

    def test_meta_before_sysex_regardless_of_order(self) -> None:
        first: list[MidiEvent] = []
        insert_event(first, text(10))
        insert_event(first, sysex(10))
        second: list[MidiEvent] = []
        insert_event(second, sysex(10))
        insert_event(second, text(10))
        assert first == second
        assert first[0].protocol.is_meta_event()

    def test_builds_sorted_track(self) -> None:
        track: list[MidiEvent] = []
        for e in [
            note_on(0, 0, 60),
            end_of_track(96),
            note_off(96, 0, 60),
            cc(0, 0, 7),
            tempo(0),
            note_on(96, 0, 62),
        ]:
            insert_event(track, e)
        assert [str(e) for e in track] == [
            str(tempo(0)),
            str(cc(0, 0, 7)),
            str(note_on(0, 0, 60)),
            str(note_off(96, 0, 60)),
            str(note_on(96, 0, 62)),
            str(end_of_track(96)),
        ]

    def test_indifferent_keeps_insertion_order(self) -> None:
        track: list[MidiEvent] = []
        a = tempo(0, 400_000)
        b = tempo(0, 600_000)
        insert_event(track, a)
        insert_event(track, b)
        assert track == [a, b]

    def test_no_op_stays_last(self) -> None:
        track: list[MidiEvent] = []
        insert_event(track, marker(0, ServiceMarker.no_op()))
        insert_event(track, note_on(500, 0, 60))
        assert track[-1].is_no_op()
        assert find_insert_position(track, note_on(1000, 0, 60)) == 1

    def test_stores_a_copy(self) -> None:
        track: list[MidiEvent] = []
        e = note_on(0, 0, 60)
        insert_event(track, e)
        e.protocol.set_velocity(1)
        assert track[0].protocol.velocity == 90

    def test_insert_mode_never_replaces(self) -> None:
        track = [note_on(50, 0, 64, 90)]
        assert insert_event(track, note_on(50, 0, 64, 30), InsertMode.INSERT)
        assert len(track) == 2

    def test_replace_same_kind(self) -> None:
        track = [cc(0, 0, 7), note_on(50, 0, 64, 90)]
        assert insert_event(track, note_on(50, 0, 64, 30), InsertMode.REPLACE)
        assert len(track) == 2
        assert track[1].protocol.velocity == 30

    def test_replace_without_match_leaves_track(self) -> None:
        track = [note_on(50, 0, 64, 90)]
        assert not insert_event(track, note_off(50, 0, 64), InsertMode.REPLACE)
        assert len(track) == 1

    def test_insert_or_replace(self) -> None:
        track = [note_on(50, 0, 64, 90)]
        assert insert_event(track, note_off(50, 0, 64), InsertMode.INSERT_OR_REPLACE)
        assert len(track) == 2
        assert track[0].protocol.is_note_off()
        assert insert_event(track, note_on(50, 0, 64, 10), InsertMode.INSERT_OR_REPLACE)
        assert len(track) == 2
        assert track[1].protocol.velocity == 10

    def test_in_order_inserts_touch_only_the_tail(self, monkeypatch) -> None:
        calls = 0
        compare = ordering.compare_events_for_insert

        def counting(a: MidiEvent, b: MidiEvent) -> InsertOrder:
            nonlocal calls
            calls += 1
            return compare(a, b)

        monkeypatch.setattr(ordering, "compare_events_for_insert", counting)
        track: list[MidiEvent] = []
        n = 3000
        for t in range(n):
            insert_event(track, note_on(t, t % 16, 60 + t % 12))
        assert len(track) == n
        assert [e.abs_time for e in track] == list(range(n))
        assert calls < 2 * n


class TestTimeConversion:

    def _deltas(self, *ticks: int) -> list[MidiEvent]:
        events = []
        for i, dt in enumerate(ticks):
            e = MidiEvent(time=DeltaTime(dt))
            e.protocol.set_note_on(0, 60 + i, 90)
            events.append(e)
        return events

    def test_to_absolute(self) -> None:
        events = to_absolute(self._deltas(0, 10, 0, 5))
        assert [e.abs_time for e in events] == [0, 10, 10, 15]

    def test_round_trip(self) -> None:
        deltas = self._deltas(3, 0, 7, 96)
        assert to_delta(to_absolute(deltas)) == deltas

    def test_inputs_are_not_modified(self) -> None:
        deltas = self._deltas(1, 2)
        to_absolute(deltas)
        assert deltas[1].delta_time == 2

    def test_to_delta_rejects_unsorted(self) -> None:
        with pytest.raises(ValueError):
            to_delta([note_on(10, 0, 60), note_on(5, 0, 60)])

    def test_wrong_flavour(self) -> None:
        with pytest.raises(TypeError):
            to_absolute([note_on(0, 0, 60)])
        with pytest.raises(TypeError):
            to_delta(self._deltas(0))
