"""Images API endpoints.

GET /{namespace}/images/{image_id} - Full image details
POST /{namespace}/images/licenses - License an image into the media library
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from stockroom.api.app import get_db_session
from stockroom.api.dependencies import (
    get_gateway,
    get_media_library,
    read_json_body,
    require_license_permission,
    require_lookup_permission,
)
from stockroom.core.sanitize import sanitize_text_field
from stockroom.db import repo
from stockroom.db.repo import DbSession
from stockroom.gateway.licensing import parse_license_request
from stockroom.gateway.service import StockGateway
from stockroom.media.base import MediaLibrary
from stockroom.models.types import LicenseRequestBody, LicenseSuccess

router = APIRouter()


@router.get("/images/{image_id}", dependencies=[Depends(require_lookup_permission)])
def get_image_details(
    image_id: str = Path(pattern=r"^\d+$"),
    gateway: StockGateway = Depends(get_gateway),
) -> JSONResponse:
    """Vendor image record (full view), passed through unchanged."""
    response = gateway.image_details(sanitize_text_field(image_id))
    return JSONResponse(response.body, status_code=response.status_code)


@router.post("/images/licenses", dependencies=[Depends(require_license_permission)])
def license_image(
    body: dict[str, Any] = Depends(read_json_body),
    gateway: StockGateway = Depends(get_gateway),
    library: MediaLibrary = Depends(get_media_library),
    session: DbSession = Depends(get_db_session),
) -> JSONResponse:
    """License an image and import the download as an attachment.

    Args:
        body: Decoded request body (injected).
        gateway: Vendor gateway (injected).
        library: Media library (injected).
        session: Database session (injected).

    Returns:
        ``{"success": true, "data": attachment}`` with the vendor status.
        Vendor failures are rendered as ``{"success": false, "data": ...}``
        by the app's VendorError handler.
    """
    request = parse_license_request(LicenseRequestBody.model_validate(body))

    status_code, attachment = gateway.license_image(request, library)
    repo.commit(session)

    envelope = LicenseSuccess(data=attachment)
    return JSONResponse(envelope.model_dump(), status_code=status_code)
