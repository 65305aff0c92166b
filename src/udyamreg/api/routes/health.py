from __future__ import annotations

from fastapi import APIRouter

from udyamreg import __version__
from udyamreg.api.responses import timestamp

router = APIRouter()

ENDPOINTS = {
    "GET /api/health": "Health check",
    "GET /api/form-schema": "Get form schema",
    "POST /api/submit": "Submit form data",
    "GET /api/pincode/{pincode}": "Get location from pincode",
}


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "message": "Udyam Registration API is running",
        "timestamp": timestamp(),
        "version": __version__,
        "endpoints": ENDPOINTS,
    }
