import os
import sys
import tempfile

import pytest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Keep the singleton logger's file handler out of the working tree.
os.environ.setdefault("BLOODCHAIN_LOG_DIR", tempfile.mkdtemp(prefix="bloodchain_logs_"))

from bloodchain.domain.donation import Donation  # noqa: E402


@pytest.fixture
def alice():
    return Donation(donor_name="Alice", blood_type="O+ ", date=1700000000)


@pytest.fixture
def donations():
    return [
        Donation(donor_name="Alice", blood_type="O+", date=1700000000),
        Donation(donor_name="Bob", blood_type="A-", date=1700086400),
        Donation(donor_name="Chidi Okonkwo", blood_type="AB+", date=1700172800),
    ]
