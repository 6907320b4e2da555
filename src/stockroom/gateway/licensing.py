"""License request parsing and shaping.

Pure functions: no HTTP and no database access.
"""

from __future__ import annotations

import math
from typing import Any

from stockroom.core.sanitize import sanitize_mapping, sanitize_text_field
from stockroom.models.domain import LicensedAsset, LicenseRequest
from stockroom.models.types import LicenseRequestBody

LICENSE_FORMAT = "jpg"


def _to_amount(text: str) -> float | None:
    try:
        amount = float(text)
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return amount or None


def parse_license_request(body: LicenseRequestBody) -> LicenseRequest:
    """Sanitize an inbound license request.

    Missing fields degrade to empty strings; a missing, zero, non-finite
    or non-numeric local price is dropped, as is a price block that is
    not an object.
    """
    price = body.price_per_download
    local_amount = (
        sanitize_text_field(price.get("local_amount")) if isinstance(price, dict) else ""
    )

    return LicenseRequest(
        subscription_id=sanitize_text_field(body.subscription_id),
        image_id=sanitize_text_field(body.id),
        size=sanitize_text_field(body.size),
        description=sanitize_text_field(body.description),
        contributor_name=sanitize_text_field(body.contributor_name),
        width=sanitize_text_field(body.width),
        height=sanitize_text_field(body.height),
        metadata=sanitize_mapping(body.metadata),
        price_local_amount=_to_amount(local_amount) if local_amount else None,
    )


def build_license_body(request: LicenseRequest) -> dict[str, Any]:
    """Build the vendor body for licensing one image.

    ``price`` is only sent for a non-zero local amount and ``metadata``
    only when non-empty.
    """
    image: dict[str, Any] = {
        "image_id": request.image_id,
        "size": request.size,
        "format": LICENSE_FORMAT,
    }

    if request.price_local_amount:
        image["price"] = request.price_local_amount

    if request.metadata:
        image["metadata"] = dict(request.metadata)

    return {"images": [image]}


def licensed_filename(image_id: str, size: str) -> str:
    """File name for a licensed download."""
    return f"shutterstock-{image_id}-{size}-licensed.jpg"


def licensed_description(image_id: str, contributor_name: str) -> str:
    """Attachment description crediting the contributor."""
    return f"Shutterstock ID: {image_id}, Photographer: {contributor_name}"


def extract_download_url(body: Any) -> str | None:
    """Read ``data[0].download.url`` from a license response."""
    try:
        url = body["data"][0]["download"]["url"]
    except (KeyError, IndexError, TypeError):
        return None
    return url if isinstance(url, str) and url else None


def build_licensed_asset(request: LicenseRequest, download_url: str) -> LicensedAsset:
    """Describe the licensed file for the media importer."""
    return LicensedAsset(
        download_url=download_url,
        filename=licensed_filename(request.image_id, request.size),
        size=request.size,
        post_title=request.description,
        post_description=licensed_description(request.image_id, request.contributor_name),
        image_id=request.image_id,
        width=request.width,
        height=request.height,
    )
