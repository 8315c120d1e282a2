from __future__ import annotations

from typing import Iterable, Iterator


class SysExBuffer:
    """Owned, growable body of a system exclusive message.

    The start (0xF0/0xF7) and the terminating 0xF7 are not stored.
    """

    def __init__(self, data: Iterable[int] = b""):
        self._buf = bytearray(data)

    @property
    def length(self) -> int:
        return len(self._buf)

    def __len__(self) -> int:
        return len(self._buf)

    def __iter__(self) -> Iterator[int]:
        return iter(self._buf)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SysExBuffer):
            return NotImplemented
        return self._buf == other._buf

    def __repr__(self) -> str:
        return f"SysExBuffer({bytes(self._buf)!r})"

    def as_bytes(self) -> bytes:
        return bytes(self._buf)

    def put_byte(self, b: int) -> None:
        if not 0 <= b <= 0xFF:
            raise ValueError(f"byte must be in [0, 255], got {b!r}")
        self._buf.append(b)

    def put_bytes(self, data: Iterable[int]) -> None:
        for b in data:
            self.put_byte(b)

    def set_content(self, data: Iterable[int]) -> None:
        self._buf = bytearray(data)

    def clear(self) -> None:
        self._buf.clear()

    def checksum(self, start: int = 0) -> int:
        """Roland style checksum of the body from ``start``: 7 bit two's complement of the sum."""
        return (-sum(self._buf[start:])) & 0x7F

    def put_checksum(self, start: int = 0) -> None:
        self._buf.append(self.checksum(start))

    def copy(self) -> SysExBuffer:
        return SysExBuffer(self._buf)
