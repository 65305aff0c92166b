"""
Unified error module.
"""

from .errors import (
    ErrorSeverity,
    FieldError,
    RegistrationError,
    InvalidFormatError,
    ValidationFailedError,
    PersistenceError,
    UpstreamError,
    PipelineTransitionError,
    Result,
)

__all__ = [
    "ErrorSeverity",
    "FieldError",
    "RegistrationError",
    "InvalidFormatError",
    "ValidationFailedError",
    "PersistenceError",
    "UpstreamError",
    "PipelineTransitionError",
    "Result",
]
