"""
Donation history kept as a flat run of fixed-width records.

Stored layout is record_0 || record_1 || ... || record_{n-1}, nothing else.
The record count is occupied // RECORD_LEN.

Precondition: appends to one account are serialized by the caller. The store
takes no locks; hosts wrap calls in `account.exclusive()`.
"""

from __future__ import annotations

from typing import Iterable, List

from bloodchain.domain.donation import RECORD_LEN, Donation, decode, encode
from bloodchain.domain.errors import BufferFull, UnalignedBuffer


def _check_aligned(occupied: int) -> None:
    if occupied % RECORD_LEN:
        raise UnalignedBuffer(
            f"Occupied length {occupied} is not a multiple of {RECORD_LEN}"
        )


def scan(data: bytes) -> List[Donation]:
    """Decode every record in `data`, in storage order."""
    _check_aligned(len(data))
    return [
        decode(data[offset : offset + RECORD_LEN])
        for offset in range(0, len(data), RECORD_LEN)
    ]


def pack_history(donations: Iterable[Donation]) -> bytes:
    return b"".join(encode(d) for d in donations)


class HistoryStore:
    def __init__(self, account):
        self.account = account

    def append(self, donation: Donation) -> None:
        offset = self.account.occupied
        _check_aligned(offset)

        free = self.account.capacity - offset
        if free < RECORD_LEN:
            raise BufferFull(
                f"Account has {free} free bytes, a donation needs {RECORD_LEN}"
            )

        self.account.write(offset, encode(donation))

    def scan(self) -> List[Donation]:
        """Snapshot of all stored donations; later appends do not change it."""
        return scan(self.account.read())

    def __len__(self) -> int:
        return self.account.occupied // RECORD_LEN
