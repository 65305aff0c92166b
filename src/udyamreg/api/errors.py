"""
Exception handlers mapping the error hierarchy onto JSON responses.
"""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from udyamreg.core.errors import (
    FieldError,
    InvalidFormatError,
    PersistenceError,
    RegistrationError,
    ValidationFailedError,
)

from .responses import error_response, validation_error_response

logger = logging.getLogger(__name__)


def _field_name(loc: Any) -> str:
    parts = [str(p) for p in (loc or ()) if p not in ("body", "path", "query")]
    return ".".join(parts) or "body"


def _request_errors(exc: RequestValidationError) -> List[FieldError]:
    return [
        FieldError(field=_field_name(err.get("loc")), message=err.get("msg", "Invalid value"), code="invalid_type")
        for err in exc.errors()
    ]


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return validation_error_response(_request_errors(exc))

    @app.exception_handler(ValidationFailedError)
    async def _validation_failed(request: Request, exc: ValidationFailedError):
        return validation_error_response(exc.details)

    @app.exception_handler(InvalidFormatError)
    async def _invalid_format(request: Request, exc: InvalidFormatError):
        return error_response(request, 400, exc.message, code=exc.code)

    @app.exception_handler(PersistenceError)
    async def _persistence(request: Request, exc: PersistenceError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return error_response(request, 500, exc.message, code=exc.code)

    @app.exception_handler(RegistrationError)
    async def _registration(request: Request, exc: RegistrationError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return error_response(request, 500, "Internal server error", code=exc.code)

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(request, 500, "Internal server error")
