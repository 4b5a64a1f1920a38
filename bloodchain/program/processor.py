"""
Instruction entrypoint around the history store.

Instruction data is one leading instruction byte followed by its payload:
  0 - add donation (payload: one encoded record)
  1 - retrieve donation history
The first account passed in is the history account.
"""

from __future__ import annotations

from typing import List, Sequence

from bloodchain.domain.donation import Donation, decode
from bloodchain.domain.errors import InvalidInstruction, NotEnoughAccounts
from bloodchain.settings.logger import logger
from bloodchain.storage.history_store import HistoryStore


ADD_DONATION = 0
RETRIEVE_HISTORY = 1


def format_history(donations: Sequence[Donation]) -> List[str]:
    return [
        f"Donation {index}: Donor Name: {d.donor_name_text!r}, "
        f"Blood Type: {d.blood_type_text!r}, Date: {d.date}"
        for index, d in enumerate(donations, start=1)
    ]


class DonationProgram:
    """append(bytes) / list() over one history account."""

    def __init__(self, account):
        self.account = account
        self.store = HistoryStore(account)

    def append(self, data: bytes) -> Donation:
        donation = decode(data)
        with self.account.exclusive():
            self.store.append(donation)
        logger.info("Donation added successfully")
        return donation

    def list(self) -> List[Donation]:
        with self.account.exclusive():
            donations = self.store.scan()
        logger.info(f"Blood Donation History: {len(donations)} donation(s)")
        # Per-record lines at DEBUG; the CLI prints the history itself.
        for line in format_history(donations):
            logger.debug(line)
        return donations


def _history_account(accounts: Sequence):
    if not accounts:
        logger.warning("No accounts provided")
        raise NotEnoughAccounts("No accounts provided")
    return accounts[0]


def process_instruction(accounts: Sequence, instruction_data: bytes):
    if not instruction_data:
        logger.warning("Instruction data is empty")
        raise InvalidInstruction("Instruction data is empty")

    instruction = instruction_data[0]

    if instruction == ADD_DONATION:
        return DonationProgram(_history_account(accounts)).append(instruction_data[1:])
    if instruction == RETRIEVE_HISTORY:
        return DonationProgram(_history_account(accounts)).list()

    logger.warning(f"Invalid instruction: {instruction}")
    raise InvalidInstruction(f"Invalid instruction: {instruction}")


def add_donation_instruction(payload: bytes) -> bytes:
    return bytes([ADD_DONATION]) + bytes(payload)


def retrieve_history_instruction() -> bytes:
    return bytes([RETRIEVE_HISTORY])
