"""
Host-side history accounts.

An account is the buffer the host hands to the history store: a fixed capacity,
the bytes of the occupied prefix, and the occupied length kept as host metadata
(never inside the history bytes). The store only calls `capacity`, `occupied`,
`read()` and `write()`; `exclusive()` is for whoever embeds the store.
"""

from __future__ import annotations

import os
import threading
from contextlib import contextmanager
from pathlib import Path

from bloodchain.domain.errors import BufferFull


def check_write(capacity: int, occupied: int, offset: int, size: int) -> None:
    if offset != occupied:
        raise ValueError(f"Write must start at occupied end {occupied}, got {offset}")
    if offset + size > capacity:
        raise BufferFull(
            f"Account full: {occupied}/{capacity} bytes used, {size} more requested"
        )


class HistoryAccount:
    """In-memory account over a fixed bytearray."""

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._buf = bytearray(capacity)
        self._occupied = 0
        self._lock = threading.Lock()

    @classmethod
    def from_bytes(cls, data: bytes, capacity: int | None = None) -> HistoryAccount:
        """Wrap existing history bytes. Capacity defaults to len(data)."""
        cap = len(data) if capacity is None else capacity
        if len(data) > cap:
            raise BufferFull(f"{len(data)} bytes do not fit in capacity {cap}")
        account = cls(cap)
        account._buf[: len(data)] = data
        account._occupied = len(data)
        return account

    @property
    def capacity(self) -> int:
        return len(self._buf)

    @property
    def occupied(self) -> int:
        return self._occupied

    def read(self) -> bytes:
        return bytes(self._buf[: self._occupied])

    def write(self, offset: int, payload: bytes) -> None:
        check_write(self.capacity, self._occupied, offset, len(payload))
        self._buf[offset : offset + len(payload)] = payload
        # Advance marker LAST
        self._occupied = offset + len(payload)

    @contextmanager
    def exclusive(self):
        with self._lock:
            yield self


class FileHistoryAccount:
    """
    Account persisted as a flat file. The file holds exactly the occupied
    prefix, so its size is the occupied length.
    """

    def __init__(self, path: str | Path, capacity: int):
        self.path = Path(path)
        self._capacity = capacity
        self._lock = threading.Lock()

    def create(self, overwrite: bool = False) -> FileHistoryAccount:
        """Initialize an empty account file."""
        if self.path.exists() and not overwrite:
            raise FileExistsError(f"Account already exists: {self.path}")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "wb"):
            pass
        return self

    def exists(self) -> bool:
        return self.path.exists()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupied(self) -> int:
        if not self.path.exists():
            return 0
        return self.path.stat().st_size

    def read(self) -> bytes:
        if not self.path.exists():
            return b""
        with open(self.path, "rb") as f:
            return f.read()

    def write(self, offset: int, payload: bytes) -> None:
        if not self.path.exists():
            raise FileNotFoundError(f"Account not initialized: {self.path}")
        check_write(self._capacity, self.occupied, offset, len(payload))
        with open(self.path, "ab") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())

    @contextmanager
    def exclusive(self):
        with self._lock:
            yield self
