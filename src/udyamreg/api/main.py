"""
Udyam Registration API - FastAPI backend for the two-step registration form
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from udyamreg import __version__
from udyamreg.config.settings import Settings, create_settings
from udyamreg.infrastructure.logging import configure_logging

from .dependencies import ServiceContainer, build_container
from .errors import register_exception_handlers
from .routes import form_schema, health, pincode, submit

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """Build the app. A prebuilt ``container`` skips wiring the real stores and clients."""
    settings = settings or (container.settings if container is not None else create_settings())

    app = FastAPI(
        title="Udyam Registration API",
        description="PIN code resolution and two-step MSME registration",
        version=__version__,
    )
    app.state.settings = settings
    app.state.container = container

    # CORS for the form front-end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "%s %s -> %s (%d ms) ip=%s ua=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request.client.host if request.client else "-",
            request.headers.get("user-agent", "-"),
        )
        return response

    register_exception_handlers(app)

    app.include_router(health.router, prefix="/api", tags=["Health"])
    app.include_router(form_schema.router, prefix="/api", tags=["Form Schema"])
    app.include_router(pincode.router, prefix="/api", tags=["PIN Code"])
    app.include_router(submit.router, prefix="/api", tags=["Submission"])

    @app.on_event("startup")
    async def _startup_services():
        configure_logging(settings.logging)
        if app.state.container is None:
            app.state.container = build_container(settings)
        logger.info("Udyam Registration API %s started", __version__)

    @app.on_event("shutdown")
    async def _shutdown_services():
        if app.state.container is not None:
            await app.state.container.close()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.api.host, port=app.state.settings.api.port)
