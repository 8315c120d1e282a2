from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .message import MidiMessage, ServiceMarker
from .sysex import SysExBuffer


@dataclass(frozen=True)
class AbsoluteTime:
    """Position on the tick timeline shared by a whole track."""

    ticks: int

    def __post_init__(self) -> None:
        if self.ticks < 0:
            raise ValueError(f"ticks must be >= 0, got {self.ticks!r}")


@dataclass(frozen=True)
class DeltaTime:
    """Ticks elapsed since the previous event of the same sequence."""

    ticks: int

    def __post_init__(self) -> None:
        if self.ticks < 0:
            raise ValueError(f"ticks must be >= 0, got {self.ticks!r}")


Message = MidiMessage | ServiceMarker
Timestamp = AbsoluteTime | DeltaTime


class MidiEvent:
    """A message plus two optional facets: a sysex payload and a time stamp.

    The event owns its message and payload.  Both are copied on the way in
    and deep-copied by :meth:`copy`.  The payload is released as soon as the
    message is no longer a system exclusive start, whether it was replaced or
    rewritten in place through :attr:`protocol`.
    """

    def __init__(
        self,
        message: Message | None = None,
        *,
        time: Timestamp | None = None,
        sysex: Iterable[int] | None = None,
    ):
        self._message: Message = message.copy() if message is not None else MidiMessage()
        self._sysex: SysExBuffer | None = None
        self.time = time
        if sysex is not None:
            self.attach_sysex(sysex)

    @classmethod
    def at(cls, ticks: int, message: Message | None = None, **kwargs: Any) -> MidiEvent:
        return cls(message, time=AbsoluteTime(ticks), **kwargs)

    # ── Message ──────────────────────────────────────────────────────────────

    @property
    def message(self) -> Message:
        return self._message

    @message.setter
    def message(self, message: Message) -> None:
        self._message = message.copy()
        self._release_stale_sysex()

    @property
    def protocol(self) -> MidiMessage | None:
        """The protocol message, or ``None`` for a service marker."""
        if isinstance(self._message, MidiMessage):
            return self._message
        return None

    def is_service_msg(self) -> bool:
        return self._message.is_service_msg()

    def is_no_op(self) -> bool:
        return self._message.is_no_op()

    def is_beat_marker(self) -> bool:
        return self._message.is_beat_marker()

    def is_user_app_marker(self) -> bool:
        return self._message.is_user_app_marker()

    def set_no_op(self) -> None:
        self.message = ServiceMarker.no_op()

    def set_beat_marker(self) -> None:
        self.message = ServiceMarker.beat_marker()

    def set_user_app_marker(self) -> None:
        self.message = ServiceMarker.user_app_marker()

    # ── Sysex payload ────────────────────────────────────────────────────────

    def _carries_sysex(self) -> bool:
        protocol = self.protocol
        return protocol is not None and protocol.is_system_exclusive()

    def _release_stale_sysex(self) -> None:
        if self._sysex is not None and not self._carries_sysex():
            self._sysex = None

    @property
    def sysex(self) -> SysExBuffer | None:
        self._release_stale_sysex()
        return self._sysex

    def attach_sysex(self, data: Iterable[int]) -> SysExBuffer:
        """Attach a copy of ``data`` as the payload of a sysex message."""
        if not self._carries_sysex():
            raise ValueError(f"cannot attach sysex data to {self._message.to_text()}")
        if isinstance(data, SysExBuffer):
            self._sysex = data.copy()
        else:
            self._sysex = SysExBuffer(data)
        return self._sysex

    def clear_sysex(self) -> None:
        self._sysex = None

    def sysex_bytes(self) -> bytes | None:
        self._release_stale_sysex()
        if self._sysex is None:
            return None
        return self._sysex.as_bytes()

    # ── Time stamp ───────────────────────────────────────────────────────────

    @property
    def abs_time(self) -> int:
        if not isinstance(self.time, AbsoluteTime):
            raise TypeError(f"event has no absolute time stamp: {self.time!r}")
        return self.time.ticks

    @property
    def delta_time(self) -> int:
        if not isinstance(self.time, DeltaTime):
            raise TypeError(f"event has no delta time stamp: {self.time!r}")
        return self.time.ticks

    def set_time(self, ticks: int) -> None:
        self.time = AbsoluteTime(ticks)

    def set_delta_time(self, ticks: int) -> None:
        self.time = DeltaTime(ticks)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def clear(self) -> None:
        """Reset to a cleared message; keep the time flavour at tick 0."""
        self._message = MidiMessage()
        self._sysex = None
        if self.time is not None:
            self.time = type(self.time)(0)

    def copy(self) -> MidiEvent:
        self._release_stale_sysex()
        clone = MidiEvent(self._message, time=self.time)
        if self._sysex is not None:
            clone._sysex = self._sysex.copy()
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MidiEvent):
            return NotImplemented
        self._release_stale_sysex()
        other._release_stale_sysex()
        return (
            self._message == other._message
            and self._sysex == other._sysex
            and self.time == other.time
        )

    def __repr__(self) -> str:
        self._release_stale_sysex()
        return f"MidiEvent({self._message!r}, time={self.time!r}, sysex={self._sysex!r})"

    # ── Rendering ────────────────────────────────────────────────────────────

    def to_text(self) -> str:
        self._release_stale_sysex()
        text = self._message.to_text()
        if self._sysex is not None:
            text = f"{text} len={self._sysex.length}"
        return text

    def __str__(self) -> str:
        return self.to_text()

    def to_record(self, *, include_none: bool = False) -> dict[str, Any]:
        self._release_stale_sysex()
        protocol = self.protocol
        record: dict[str, Any] = {
            "t": self.time.ticks if isinstance(self.time, AbsoluteTime) else None,
            "dt": self.time.ticks if isinstance(self.time, DeltaTime) else None,
            "text": self.to_text(),
            "service": None if protocol is not None else self._message.kind.value,
            "status": protocol.status if protocol is not None else None,
            "channel": protocol.channel if protocol is not None and protocol.is_channel_msg() else None,
            "data": list(protocol.data) if protocol is not None else None,
            "data_length": protocol.data_length if protocol is not None else None,
            "sysex": self._sysex.as_bytes().hex() if self._sysex is not None else None,
        }
        if include_none:
            return record
        return {k: v for k, v in record.items() if v is not None}
