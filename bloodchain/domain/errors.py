class DonationError(Exception):
    """Base class for failures surfaced by the donation history core."""


class MalformedRecord(DonationError, ValueError):
    """Fewer bytes than one encoded record were available."""


class BufferFull(DonationError):
    """The history account has no room for another record."""


class UnalignedBuffer(DonationError):
    """The occupied prefix is not a whole number of records."""


class InvalidInstruction(DonationError, ValueError):
    pass


class NotEnoughAccounts(DonationError):
    pass
