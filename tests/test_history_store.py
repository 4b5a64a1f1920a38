import pytest

from bloodchain.domain.donation import RECORD_LEN, Donation, encode
from bloodchain.domain.errors import BufferFull, MalformedRecord, UnalignedBuffer
from bloodchain.storage.accounts import HistoryAccount
from bloodchain.storage.history_store import HistoryStore, pack_history, scan


def test_scan_empty_account_is_empty():
    store = HistoryStore(HistoryAccount(RECORD_LEN * 4))
    assert store.scan() == []
    assert len(store) == 0


def test_append_then_scan_keeps_order(donations):
    store = HistoryStore(HistoryAccount(RECORD_LEN * 10))
    for d in donations:
        store.append(d)

    assert store.scan() == donations
    assert len(store) == len(donations)
    assert store.account.occupied == RECORD_LEN * len(donations)


def test_duplicates_are_kept(alice):
    store = HistoryStore(HistoryAccount(RECORD_LEN * 3))
    store.append(alice)
    store.append(alice)

    assert store.scan() == [alice, alice]


def test_stored_bytes_are_plain_concatenation(donations):
    account = HistoryAccount(RECORD_LEN * 3)
    store = HistoryStore(account)
    for d in donations:
        store.append(d)

    assert account.read() == b"".join(encode(d) for d in donations)
    assert account.read() == pack_history(donations)


def test_append_with_one_byte_short_is_buffer_full(donations):
    n = 2
    account = HistoryAccount(RECORD_LEN * (n + 1) - 1)
    store = HistoryStore(account)
    for d in donations[:n]:
        store.append(d)

    before = account.read()
    with pytest.raises(BufferFull):
        store.append(donations[2])

    assert account.read() == before
    assert account.occupied == RECORD_LEN * n


def test_append_with_exactly_one_slot_free_succeeds(donations):
    account = HistoryAccount(RECORD_LEN * 3)
    store = HistoryStore(account)
    for d in donations:
        store.append(d)

    assert account.occupied == account.capacity
    with pytest.raises(BufferFull):
        store.append(donations[0])


def test_zero_capacity_account_is_always_full(alice):
    with pytest.raises(BufferFull):
        HistoryStore(HistoryAccount(0)).append(alice)


def test_scan_is_idempotent(donations):
    store = HistoryStore(HistoryAccount.from_bytes(pack_history(donations)))
    first = store.scan()
    second = store.scan()

    assert first == second == donations


def test_scan_returns_snapshot(donations):
    store = HistoryStore(HistoryAccount(RECORD_LEN * 3))
    store.append(donations[0])
    snapshot = store.scan()
    store.append(donations[1])

    assert snapshot == donations[:1]
    assert store.scan() == donations[:2]


def test_scan_unaligned_raises(donations):
    data = pack_history(donations) + b"\x00" * 7
    with pytest.raises(UnalignedBuffer):
        HistoryStore(HistoryAccount.from_bytes(data)).scan()
    with pytest.raises(UnalignedBuffer):
        scan(data[:39])


def test_append_to_unaligned_raises_without_writing(alice):
    account = HistoryAccount.from_bytes(b"\x01" * 41, capacity=RECORD_LEN * 4)
    with pytest.raises(UnalignedBuffer):
        HistoryStore(account).append(alice)
    assert account.read() == b"\x01" * 41


def test_scan_ignores_unused_capacity(alice):
    account = HistoryAccount(RECORD_LEN * 100)
    HistoryStore(account).append(alice)
    assert HistoryStore(account).scan() == [alice]


def test_scan_raw_bytes(donations):
    assert scan(b"") == []
    assert scan(pack_history(donations)) == donations


def test_zeroed_slot_decodes_as_empty_donation():
    (d,) = scan(b"\x00" * RECORD_LEN)
    assert d == Donation(donor_name=b"", blood_type=b"", date=0)


def test_error_types_are_distinct():
    assert not issubclass(MalformedRecord, BufferFull)
    assert not issubclass(UnalignedBuffer, MalformedRecord)
