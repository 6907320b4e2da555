"""FastAPI application factory."""

from __future__ import annotations

import logging
from typing import Generator

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from stockroom.config import VERSION, Settings, get_settings
from stockroom.db.repo import DbSession
from stockroom.db.session import get_session, init_db
from stockroom.gateway.client import VendorError
from stockroom.models.types import ErrorEnvelope

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was created with."""
    return request.app.state.settings


def get_db_session(
    settings: Settings = Depends(get_app_settings),
) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = get_session(settings.db_path)
    try:
        yield session
    finally:
        session.close()


def get_http_client() -> Generator[httpx.Client, None, None]:
    """Dependency to get an outbound HTTP client, closed after request."""
    with httpx.Client() as client:
        yield client


def _vendor_error_handler(request: Request, exc: VendorError) -> JSONResponse:
    return JSONResponse(ErrorEnvelope(data=exc.body).model_dump(), status_code=exc.status_code)


def _transport_error_handler(request: Request, exc: httpx.TransportError) -> JSONResponse:
    logger.warning(f"Outbound request failed for {request.url.path}: {exc!r}")
    envelope = ErrorEnvelope(data={"code": "http_request_failed", "message": str(exc)})
    return JSONResponse(envelope.model_dump(), status_code=502)


def create_app(settings: Settings | None = None, init_database: bool = True) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Settings to use. Defaults to the environment.
        init_database: Create tables on startup.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Stockroom API",
        description="Shutterstock licensing gateway for the media library",
        version=VERSION,
    )
    app.state.settings = settings

    app.add_exception_handler(VendorError, _vendor_error_handler)
    app.add_exception_handler(httpx.TransportError, _transport_error_handler)

    # Include routes
    from stockroom.api.routes import contributors, images, subscriptions

    prefix = f"/{settings.namespace}"
    app.include_router(subscriptions.router, prefix=prefix)
    app.include_router(images.router, prefix=prefix)
    app.include_router(contributors.router, prefix=prefix)

    if init_database:
        init_db(settings.db_path)

    # Serve imported media when the uploads directory exists
    if settings.uploads_dir.exists() and settings.uploads_url.startswith("/"):
        app.mount(
            settings.uploads_url,
            StaticFiles(directory=str(settings.uploads_dir)),
            name="uploads",
        )

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
