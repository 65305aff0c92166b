"""
Registration submission: both stages in one request.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse

from udyamreg.api.dependencies import ServiceContainer, client_meta, get_container
from udyamreg.api.responses import validation_error_response

router = APIRouter()


@router.post("/submit")
async def submit_form(
    http_request: Request,
    payload: Dict[str, Any] = Body(...),
    container: ServiceContainer = Depends(get_container),
):
    # PersistenceError propagates to the exception handler (500).
    state = await container.pipeline.submit_complete(
        payload,
        client_meta=client_meta(http_request),
        endpoint="/api/submit",
        method="POST",
    )
    if state.errors:
        return validation_error_response(state.errors)

    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "data": state.record.to_summary(),
            "message": "Form submitted successfully",
        },
    )
