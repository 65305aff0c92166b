from __future__ import annotations

from datetime import datetime, timezone

import pytest

from udyamreg.application.workflows import (
    GoBack,
    PipelineState,
    RegistrationPersisted,
    Stage,
    SubmitEnterprise,
    SubmitIdentity,
    reduce,
)
from udyamreg.core.errors import PipelineTransitionError
from udyamreg.domain.location import Resolution, ResolutionSource, ResolutionStatus
from udyamreg.domain.registration import RegistrationRecord


def _validated(identity_payload) -> PipelineState:
    return reduce(PipelineState(), SubmitIdentity(identity_payload))


def test_valid_identity_moves_to_stage1_validated(identity_payload):
    state = _validated(identity_payload)
    assert state.stage is Stage.STAGE1_VALIDATED
    assert state.identity is not None
    assert state.errors == ()


def test_invalid_identity_stays_pending_with_errors(identity_payload):
    identity_payload["aadhaarNumber"] = "123"
    identity_payload["mobileNumber"] = "123"
    state = reduce(PipelineState(), SubmitIdentity(identity_payload))
    assert state.stage is Stage.STAGE1_PENDING
    assert {e.field for e in state.errors} == {"aadhaarNumber", "mobileNumber"}

    # resubmission is always allowed
    identity_payload["aadhaarNumber"] = "123456789012"
    identity_payload["mobileNumber"] = "9876543210"
    assert reduce(state, SubmitIdentity(identity_payload)).stage is Stage.STAGE1_VALIDATED


def test_found_resolution_overwrites_user_location(identity_payload, enterprise_payload, delhi_record):
    resolution = Resolution(
        pincode="110001",
        status=ResolutionStatus.FOUND,
        record=delhi_record,
        source=ResolutionSource.UPSTREAM,
    )
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload, resolution))
    assert state.stage is Stage.STAGE2_PENDING
    assert (state.enterprise.state, state.enterprise.district, state.enterprise.city) == (
        "Delhi",
        "Central Delhi",
        "New Delhi",
    )


def test_resolution_fills_blank_derived_fields(identity_payload, enterprise_payload, delhi_record):
    for key in ("state", "district", "city"):
        enterprise_payload.pop(key)
    resolution = Resolution(pincode="110001", status=ResolutionStatus.FOUND, record=delhi_record)
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload, resolution))
    assert state.ok
    assert state.enterprise.state == "Delhi"


@pytest.mark.parametrize("status", [ResolutionStatus.NOT_FOUND, ResolutionStatus.UNAVAILABLE])
def test_miss_keeps_user_location(identity_payload, enterprise_payload, status):
    resolution = Resolution(pincode="110001", status=status)
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload, resolution))
    assert state.ok
    assert (state.enterprise.state, state.enterprise.district, state.enterprise.city) == (
        "Haryana",
        "Gurgaon",
        "Gurugram",
    )


def test_invalid_enterprise_stays_in_stage2(identity_payload, enterprise_payload):
    enterprise_payload["businessType"] = "trust"
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload))
    assert state.stage is Stage.STAGE2_PENDING
    assert state.enterprise is None
    assert [e.field for e in state.errors] == ["businessType"]


def test_syntax_errors_hold_back_location_fields(identity_payload, enterprise_payload):
    enterprise_payload["businessName"] = "K"
    enterprise_payload.pop("state")
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload))
    assert state.stage is Stage.STAGE2_PENDING
    assert [(e.field, e.code) for e in state.errors] == [("businessName", "too_short")]
    assert state.resolution is None


def test_persisted_completes(identity_payload, enterprise_payload):
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload))
    record = RegistrationRecord(
        id="r-1",
        identity=state.identity,
        enterprise=state.enterprise,
        created_at=datetime.now(timezone.utc),
    )
    done = reduce(state, RegistrationPersisted(record))
    assert done.stage is Stage.COMPLETED
    assert done.record.id == "r-1"


def test_persisted_requires_valid_enterprise(identity_payload, enterprise_payload):
    enterprise_payload["pincode"] = "abc"
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload))
    record = RegistrationRecord(id="r-1", identity=state.identity, enterprise=None, created_at=datetime.now(timezone.utc))  # type: ignore[arg-type]
    with pytest.raises(PipelineTransitionError):
        reduce(state, RegistrationPersisted(record))


def test_go_back_keeps_stage1_data(identity_payload, enterprise_payload):
    state = reduce(_validated(identity_payload), SubmitEnterprise(enterprise_payload))
    back = reduce(state, GoBack())
    assert back.stage is Stage.STAGE1_PENDING
    assert back.identity_data == identity_payload
    assert back.enterprise_data["businessName"] == "Kumar Traders"


def test_enterprise_before_identity_is_rejected(enterprise_payload):
    with pytest.raises(PipelineTransitionError):
        reduce(PipelineState(), SubmitEnterprise(enterprise_payload))


def test_go_back_from_stage1_pending_is_rejected():
    with pytest.raises(PipelineTransitionError):
        reduce(PipelineState(), GoBack())


def test_identity_after_validation_is_rejected(identity_payload):
    with pytest.raises(PipelineTransitionError):
        reduce(_validated(identity_payload), SubmitIdentity(identity_payload))
