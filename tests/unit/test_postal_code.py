from __future__ import annotations

import pytest

from udyamreg.core.errors import InvalidFormatError
from udyamreg.domain.location import (
    INVALID_POSTAL_CODE_MESSAGE,
    LocationRecord,
    Resolution,
    ResolutionSource,
    ResolutionStatus,
    UpstreamOutcome,
    is_valid_postal_code,
    validate_postal_code,
)


@pytest.mark.parametrize("code", ["110001", "000000", "999999"])
def test_six_digits_are_valid(code):
    assert is_valid_postal_code(code)
    assert validate_postal_code(code).unwrap() == code


@pytest.mark.parametrize("code", ["12345", "1234567", "abcdef", "11000a", " 110001", "110001\n", "", "１１０００１"])
def test_malformed_codes_fail(code):
    result = validate_postal_code(code)
    assert not result.is_ok()
    err = result.error()
    assert isinstance(err, InvalidFormatError)
    assert err.message == INVALID_POSTAL_CODE_MESSAGE


def test_non_string_is_invalid():
    assert not is_valid_postal_code(110001)
    assert not is_valid_postal_code(None)
    assert validate_postal_code(110001).error().context == {"pincode": "110001"}


def test_location_record_to_dict(delhi_record):
    assert delhi_record.to_dict() == {
        "pincode": "110001",
        "city": "New Delhi",
        "district": "Central Delhi",
        "state": "Delhi",
    }


def test_upstream_outcome_constructors(delhi_record):
    assert UpstreamOutcome.found(delhi_record).status is ResolutionStatus.FOUND
    assert UpstreamOutcome.not_found("x").status is ResolutionStatus.NOT_FOUND
    assert UpstreamOutcome.unavailable("timeout").reason == "timeout"


def test_resolution_keeps_miss_kind_in_audit_details():
    miss = Resolution(pincode="999999", status=ResolutionStatus.UNAVAILABLE, reason="timeout")
    assert not miss.found
    assert miss.to_audit_details() == {
        "pincode": "999999",
        "resolution": "unavailable",
        "source": "none",
        "reason": "timeout",
    }


def test_found_resolution(delhi_record):
    hit = Resolution(
        pincode="110001",
        status=ResolutionStatus.FOUND,
        record=delhi_record,
        source=ResolutionSource.CACHE,
    )
    assert hit.found
    assert hit.to_audit_details()["source"] == "cache"
    assert "reason" not in hit.to_audit_details()


def test_record_is_immutable(delhi_record):
    with pytest.raises(Exception):
        delhi_record.state = "Haryana"  # type: ignore[misc]
    assert isinstance(delhi_record, LocationRecord)
