"""
Donation record and its fixed-width binary layout.

Layout (40 bytes, no header, no length):
  [0:32)  - donor_name (UTF-8, zero padded or truncated)
  [32:35) - blood_type (UTF-8, zero padded or truncated)
  [35:40) - date (unsigned, little-endian, low 5 bytes)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bloodchain.domain.errors import MalformedRecord


DONOR_NAME_LEN = 32
BLOOD_TYPE_LEN = 3
DATE_LEN = 5
RECORD_LEN = DONOR_NAME_LEN + BLOOD_TYPE_LEN + DATE_LEN

_NAME_END = DONOR_NAME_LEN
_BLOOD_END = _NAME_END + BLOOD_TYPE_LEN

# Largest date the 5-byte slot can hold is MAX_DATE - 1.
MAX_DATE = 1 << (8 * DATE_LEN)


def fit_field(value, width: int):
    """Encode str as UTF-8, then truncate or zero-pad to exactly `width` bytes."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    if not isinstance(value, (bytes, bytearray, memoryview)):
        return value
    raw = bytes(value)[:width]
    return raw.ljust(width, b"\x00")


def field_text(raw: bytes) -> str:
    return raw.rstrip(b"\x00").decode("utf-8", errors="replace")


class Donation(BaseModel):
    model_config = ConfigDict(frozen=True)

    donor_name: bytes
    blood_type: bytes
    date: int = Field(ge=0, lt=MAX_DATE)

    @field_validator("donor_name", mode="before")
    @classmethod
    def _fit_donor_name(cls, v):
        return fit_field(v, DONOR_NAME_LEN)

    @field_validator("blood_type", mode="before")
    @classmethod
    def _fit_blood_type(cls, v):
        return fit_field(v, BLOOD_TYPE_LEN)

    @property
    def donor_name_text(self) -> str:
        return field_text(self.donor_name)

    @property
    def blood_type_text(self) -> str:
        return field_text(self.blood_type)


def encode(donation: Donation) -> bytes:
    """Pack a donation into exactly RECORD_LEN bytes."""
    out = bytearray(RECORD_LEN)
    out[:_NAME_END] = donation.donor_name
    out[_NAME_END:_BLOOD_END] = donation.blood_type
    out[_BLOOD_END:RECORD_LEN] = donation.date.to_bytes(DATE_LEN, "little")
    return bytes(out)


def decode(data) -> Donation:
    """
    Rebuild a donation from the first RECORD_LEN bytes of `data`.
    Content is never validated; only a short input fails.
    """
    raw = bytes(data[:RECORD_LEN])
    if len(raw) < RECORD_LEN:
        raise MalformedRecord(
            f"Donation record needs {RECORD_LEN} bytes, got {len(raw)}"
        )

    return Donation(
        donor_name=raw[:_NAME_END],
        blood_type=raw[_NAME_END:_BLOOD_END],
        date=int.from_bytes(raw[_BLOOD_END:RECORD_LEN], "little"),
    )
