"""
PIN code lookup used by the form's auto-fill.
"""

from __future__ import annotations

import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from udyamreg.api.dependencies import ServiceContainer, client_meta, get_container
from udyamreg.core.errors import InvalidFormatError
from udyamreg.domain.audit import SubmissionLogEntry
from udyamreg.domain.location import INVALID_POSTAL_CODE_MESSAGE

router = APIRouter()

NOT_FOUND_MESSAGE = "Location details not found for the provided PIN code."


@router.get("/pincode/{pincode}")
async def get_pincode_details(
    pincode: str,
    http_request: Request,
    container: ServiceContainer = Depends(get_container),
):
    started = time.perf_counter()
    endpoint = f"/api/pincode/{pincode}"

    def audit(status_code: int, details: dict, error_message: str | None = None) -> None:
        container.audit.emit(
            SubmissionLogEntry(
                endpoint=endpoint,
                method="GET",
                status_code=status_code,
                duration_ms=int((time.perf_counter() - started) * 1000),
                client_meta=client_meta(http_request),
                error_message=error_message,
                details=details,
            )
        )

    try:
        resolution = await container.resolver.resolve(pincode)
    except InvalidFormatError:
        audit(400, {"pincode": pincode}, INVALID_POSTAL_CODE_MESSAGE)
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": INVALID_POSTAL_CODE_MESSAGE},
        )

    if not resolution.found:
        audit(404, resolution.to_audit_details(), NOT_FOUND_MESSAGE)
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": NOT_FOUND_MESSAGE, "data": None},
        )

    audit(200, resolution.to_audit_details())
    return {
        "success": True,
        "data": resolution.record.to_dict(),
        "message": "Location details retrieved successfully",
    }
