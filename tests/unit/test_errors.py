"""
Error hierarchy and Result wrapper.
"""

import pytest

from udyamreg.core.errors import (
    ErrorSeverity,
    FieldError,
    InvalidFormatError,
    PersistenceError,
    PipelineTransitionError,
    RegistrationError,
    Result,
    UpstreamError,
    ValidationFailedError,
)


class TestErrorSeverity:
    def test_severity_values(self):
        assert ErrorSeverity.WARNING.value == "warning"
        assert ErrorSeverity.ERROR.value == "error"
        assert ErrorSeverity.CRITICAL.value == "critical"


class TestRegistrationError:
    def test_error_str(self):
        err = RegistrationError(message="Test error", code="TEST")
        assert str(err) == "[TEST] Test error"

    def test_subclass_defaults(self):
        assert InvalidFormatError(message="x").code == "INVALID_FORMAT"
        assert InvalidFormatError(message="x").severity is ErrorSeverity.WARNING
        assert PersistenceError(message="x").code == "PERSISTENCE_FAILED"
        assert PersistenceError(message="x").severity is ErrorSeverity.CRITICAL
        assert PipelineTransitionError(message="x").code == "INVALID_TRANSITION"

    def test_upstream_error_carries_status(self):
        err = UpstreamError(message="API error: 503", status=503)
        assert err.status == 503
        assert err.code == "UPSTREAM_ERROR"

    def test_validation_failed_carries_details(self):
        details = [FieldError(field="aadhaarNumber", message="bad", code="invalid_length")]
        err = ValidationFailedError(message="Validation error", details=details)
        assert err.details[0].to_dict() == {"field": "aadhaarNumber", "message": "bad", "code": "invalid_length"}

    def test_is_exception(self):
        with pytest.raises(RegistrationError):
            raise PersistenceError(message="db down")


class TestResult:
    def test_ok_result(self):
        result = Result.ok(42)
        assert result.is_ok()
        assert result.unwrap() == 42
        assert result.error() is None

    def test_err_result(self):
        result = Result.err(InvalidFormatError(message="bad"))
        assert not result.is_ok()
        assert isinstance(result.error(), InvalidFormatError)

    def test_unwrap_raises_error(self):
        result = Result.err(InvalidFormatError(message="bad"))
        with pytest.raises(InvalidFormatError):
            result.unwrap()
