# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds src to sys.path so `import udyamreg` works without installing.
"""

import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional

import pytest

project_root = Path(__file__).parent.parent
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from udyamreg.domain.location import LocationRecord, UpstreamOutcome  # noqa: E402

DELHI = LocationRecord(pincode="110001", city="New Delhi", district="Central Delhi", state="Delhi")


class FakeUpstream:
    """Scripted upstream resolver: records calls, optionally blocks on a gate."""

    def __init__(self, outcomes: Optional[Dict[str, UpstreamOutcome]] = None, gate: Optional[asyncio.Event] = None):
        self.outcomes = dict(outcomes or {})
        self.gate = gate
        self.calls: List[str] = []
        self.started = 0
        self.cancelled = 0
        self.closed = False

    async def resolve(self, pincode: str) -> UpstreamOutcome:
        self.calls.append(pincode)
        self.started += 1
        if self.gate is not None:
            try:
                await self.gate.wait()
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
        return self.outcomes.get(pincode, UpstreamOutcome.not_found("no records"))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def delhi_record() -> LocationRecord:
    return DELHI


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream({"110001": UpstreamOutcome.found(DELHI)})


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'udyamreg_test.db'}"


@pytest.fixture
def identity_payload() -> Dict[str, str]:
    return {
        "aadhaarNumber": "123456789012",
        "applicantName": "Ravi Kumar",
        "mobileNumber": "9876543210",
        "emailAddress": "ravi.kumar@example.com",
        "panNumber": "ABCDE1234F",
    }


@pytest.fixture
def enterprise_payload() -> Dict[str, str]:
    return {
        "businessName": "Kumar Traders",
        "businessType": "proprietorship",
        "businessAddress": "12 Connaught Place, New Delhi",
        "pincode": "110001",
        "state": "Haryana",
        "district": "Gurgaon",
        "city": "Gurugram",
        "gstinNumber": "07ABCDE1234F1Z5",
    }


@pytest.fixture
def valid_payload(identity_payload, enterprise_payload) -> Dict[str, str]:
    return {**identity_payload, **enterprise_payload}


@pytest.fixture
def make_upstream():
    return FakeUpstream
