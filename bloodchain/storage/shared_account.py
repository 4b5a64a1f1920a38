"""
SharedHistoryAccount: one history account visible to several processes.

Usage:
    # Owning process:
    acc = SharedHistoryAccount.create("donations", capacity=40 * 1000)

    # Other processes:
    acc = SharedHistoryAccount.attach("donations", capacity=40 * 1000, lock=shared_lock)

    # Cleanup:
    acc.close()
    acc.unlink()  # Only in owning process

Memory layout of the segment:
  [0:8]  - occupied length (int64), host metadata
  [8:]   - history data region (capacity bytes)
The history data itself carries no header; the length slot belongs to the host.
"""

from __future__ import annotations

from contextlib import contextmanager
from multiprocessing import Lock, shared_memory

import numpy as np

from bloodchain.storage.accounts import check_write


class SharedHistoryAccount:

    _HEADER_SIZE = 8

    def __init__(
        self,
        shm: shared_memory.SharedMemory,
        capacity: int,
        lock: Lock,
        is_creator: bool = False,
    ):
        self._shm = shm
        self._capacity = capacity
        self._lock = lock
        self._is_creator = is_creator
        self._data_offset = self._HEADER_SIZE

    @staticmethod
    def segment_name(name: str) -> str:
        return f"bch_{name}"

    @classmethod
    def create(cls, name: str, capacity: int, lock: Lock | None = None) -> SharedHistoryAccount:
        """Create a NEW zeroed account segment. Call from the owning process only."""
        total = cls._HEADER_SIZE + capacity
        shm = shared_memory.SharedMemory(name=cls.segment_name(name), create=True, size=total)

        np.frombuffer(shm.buf, dtype=np.uint8, count=total)[:] = 0

        return cls(shm=shm, capacity=capacity, lock=lock or Lock(), is_creator=True)

    @classmethod
    def attach(cls, name: str, capacity: int, lock: Lock | None = None) -> SharedHistoryAccount:
        """
        Attach to an EXISTING account segment. `capacity` must match the
        creator's: the OS may round segment sizes up, so shm.size is not it.
        """
        shm = shared_memory.SharedMemory(name=cls.segment_name(name), create=False)
        if capacity > shm.size - cls._HEADER_SIZE:
            shm.close()
            raise ValueError(
                f"Capacity {capacity} exceeds segment data region {shm.size - cls._HEADER_SIZE}"
            )
        return cls(shm=shm, capacity=capacity, lock=lock or Lock(), is_creator=False)

    def _length_slot(self) -> np.ndarray:
        return np.frombuffer(self._shm.buf, dtype=np.int64, count=1, offset=0)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupied(self) -> int:
        return int(self._length_slot()[0])

    def read(self) -> bytes:
        n = self.occupied
        return bytes(self._shm.buf[self._data_offset : self._data_offset + n])

    def write(self, offset: int, payload: bytes) -> None:
        check_write(self._capacity, self.occupied, offset, len(payload))
        start = self._data_offset + offset
        self._shm.buf[start : start + len(payload)] = payload

        # Set length LAST (acts as commit)
        self._length_slot()[:] = offset + len(payload)

    @contextmanager
    def exclusive(self):
        with self._lock:
            yield self

    def close(self):
        """Close this process's view. Safe to call multiple times."""
        try:
            self._shm.close()
        except (BufferError, OSError):
            pass

    def unlink(self):
        """Remove the segment. Only the creator does this."""
        if self._is_creator:
            try:
                self._shm.unlink()
            except FileNotFoundError:
                pass
