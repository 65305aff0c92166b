"""
PIN code and location value objects.

A PIN code is the six-digit locality identifier used as the cache key. A
``LocationRecord`` is the city/district/state tuple it resolves to; once
cached it is treated as immutable ground truth.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from udyamreg.core.errors import InvalidFormatError, Result

POSTAL_CODE_RE = re.compile(r"^[0-9]{6}$")

INVALID_POSTAL_CODE_MESSAGE = "Invalid PIN code format. Please provide a 6-digit PIN code."


def is_valid_postal_code(value: Any) -> bool:
    return isinstance(value, str) and bool(POSTAL_CODE_RE.fullmatch(value))


def validate_postal_code(value: Any) -> Result[str, InvalidFormatError]:
    """Pure syntax check, run at the boundary of every lookup path."""
    if is_valid_postal_code(value):
        return Result.ok(value)
    return Result.err(
        InvalidFormatError(
            message=INVALID_POSTAL_CODE_MESSAGE,
            context={"pincode": value if isinstance(value, str) else repr(value)},
        )
    )


@dataclass(frozen=True)
class LocationRecord:
    pincode: str
    district: str
    state: str
    city: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pincode": self.pincode,
            "city": self.city,
            "district": self.district,
            "state": self.state,
        }


class ResolutionStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


class ResolutionSource(str, Enum):
    CACHE = "cache"
    UPSTREAM = "upstream"
    NONE = "none"


@dataclass(frozen=True)
class UpstreamOutcome:
    """What a single upstream call produced: a record, an explicit miss, or nothing."""

    status: ResolutionStatus
    record: Optional[LocationRecord] = None
    reason: str = ""

    @classmethod
    def found(cls, record: LocationRecord) -> "UpstreamOutcome":
        return cls(status=ResolutionStatus.FOUND, record=record)

    @classmethod
    def not_found(cls, reason: str = "") -> "UpstreamOutcome":
        return cls(status=ResolutionStatus.NOT_FOUND, reason=reason)

    @classmethod
    def unavailable(cls, reason: str = "") -> "UpstreamOutcome":
        return cls(status=ResolutionStatus.UNAVAILABLE, reason=reason)


@dataclass(frozen=True)
class Resolution:
    """
    Result of resolving a PIN code through cache then upstream.

    ``not_found`` and ``unavailable`` are both misses for callers; the tag is
    kept so audit entries can tell "no such place" from "lookup service down".
    """

    pincode: str
    status: ResolutionStatus
    record: Optional[LocationRecord] = None
    source: ResolutionSource = ResolutionSource.NONE
    reason: str = ""

    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.FOUND and self.record is not None

    def to_audit_details(self) -> Dict[str, Any]:
        details: Dict[str, Any] = {
            "pincode": self.pincode,
            "resolution": self.status.value,
            "source": self.source.value,
        }
        if self.reason:
            details["reason"] = self.reason
        return details
