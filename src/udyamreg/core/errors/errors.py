"""
Unified errors and a Result wrapper, so callers can degrade or abort by severity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, TypeVar, Union, cast


class ErrorSeverity(Enum):
    WARNING = "warning"      # caller may continue
    ERROR = "error"          # request fails
    CRITICAL = "critical"    # request fails, needs operator attention


@dataclass(frozen=True)
class FieldError:
    """One failing field of a submission payload."""

    field: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}


@dataclass
class RegistrationError(Exception):
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    code: str = "UNKNOWN"
    context: Dict[str, Any] | None = None

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


@dataclass
class InvalidFormatError(RegistrationError):
    """Client input is malformed; raised before any storage or network access."""

    severity: ErrorSeverity = ErrorSeverity.WARNING
    code: str = "INVALID_FORMAT"


@dataclass
class ValidationFailedError(RegistrationError):
    severity: ErrorSeverity = ErrorSeverity.WARNING
    code: str = "VALIDATION_FAILED"
    details: List[FieldError] = field(default_factory=list)


@dataclass
class PersistenceError(RegistrationError):
    severity: ErrorSeverity = ErrorSeverity.CRITICAL
    code: str = "PERSISTENCE_FAILED"


@dataclass
class UpstreamError(RegistrationError):
    code: str = "UPSTREAM_ERROR"
    status: int | None = None


@dataclass
class PipelineTransitionError(RegistrationError):
    code: str = "INVALID_TRANSITION"


T = TypeVar("T")
E = TypeVar("E", bound=RegistrationError)


@dataclass
class Result(Generic[T, E]):
    """Functional result wrapper, avoids scattered status dicts."""

    _value: Union[T, E]
    _is_ok: bool

    @classmethod
    def ok(cls, value: T) -> "Result[T, E]":
        return cls(_value=value, _is_ok=True)

    @classmethod
    def err(cls, error: E) -> "Result[T, E]":
        return cls(_value=error, _is_ok=False)

    def is_ok(self) -> bool:
        return self._is_ok

    def unwrap(self) -> T:
        if not self._is_ok:
            raise cast(E, self._value)
        return cast(T, self._value)

    def error(self) -> E | None:
        return None if self._is_ok else cast(E, self._value)
