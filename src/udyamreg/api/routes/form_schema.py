from __future__ import annotations

import time

from fastapi import APIRouter, Depends, Request

from udyamreg.api.dependencies import ServiceContainer, client_meta, get_container
from udyamreg.domain.audit import SubmissionLogEntry

router = APIRouter()


@router.get("/form-schema")
async def get_form_schema(
    http_request: Request,
    container: ServiceContainer = Depends(get_container),
):
    started = time.perf_counter()
    schema, is_fallback = container.form_schema.load()
    container.audit.emit(
        SubmissionLogEntry(
            endpoint="/api/form-schema",
            method="GET",
            status_code=200,
            duration_ms=int((time.perf_counter() - started) * 1000),
            client_meta=client_meta(http_request),
            details={"fallback": is_fallback},
        )
    )
    message = (
        "Form schema retrieved (fallback version)" if is_fallback else "Form schema retrieved successfully"
    )
    return {"success": True, "data": schema, "message": message}
