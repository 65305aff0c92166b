from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable

from fastapi import Request
from fastapi.responses import JSONResponse

from udyamreg.core.errors import FieldError
from udyamreg.domain.registration import VALIDATION_ERROR_MESSAGE


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def validation_error_response(details: Iterable[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": VALIDATION_ERROR_MESSAGE,
            "message": "Invalid request data",
            "details": [d.to_dict() for d in details],
            "timestamp": timestamp(),
        },
    )


def error_response(request: Request, status_code: int, message: str, **extra: Any) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": True,
        "message": message,
        "timestamp": timestamp(),
        "path": request.url.path,
        "method": request.method,
    }
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)
