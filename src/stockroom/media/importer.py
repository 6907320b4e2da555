"""Import a licensed download into the media library.

Download, store, optionally scale down ``huge`` renditions, then register
the attachment and its derivatives.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from stockroom.media.base import MediaLibrary
from stockroom.models.domain import AttachmentDraft, LicensedAsset

logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 60.0
HUGE_SIZE = "huge"
HUGE_MAX_WIDTH = 1500


def _to_number(text: str) -> float:
    try:
        return float(text)
    except (TypeError, ValueError):
        return 0.0


def scaled_height(width: float, height: float, max_width: int = HUGE_MAX_WIDTH) -> int:
    """Height that keeps the aspect ratio at max_width.

    Example:
        >>> scaled_height(2000, 3000)
        2250
    """
    return round(height * (max_width / width))


def _mime_type(response: httpx.Response) -> str:
    return response.headers.get("content-type", "").split(";")[0].strip()


def import_licensed_image(
    asset: LicensedAsset,
    http: httpx.Client,
    library: MediaLibrary,
) -> dict[str, Any]:
    """Fetch a licensed file and add it to the media library.

    Args:
        asset: Download URL and attachment fields.
        http: HTTP client for the download.
        library: Media backend.

    Returns:
        The attachment prepared for client consumption.

    Raises:
        httpx.TransportError: If the download fails; not wrapped.
    """
    response = http.get(asset.download_url, timeout=DOWNLOAD_TIMEOUT, follow_redirects=True)
    if response.status_code != 200:
        logger.warning(
            f"Download for image {asset.image_id} returned {response.status_code}"
        )

    path: Path = library.store(response.content, asset.filename)

    if asset.size == HUGE_SIZE:
        width, height = _to_number(asset.width), _to_number(asset.height)
        if width > 0 and height > 0:
            try:
                path = library.resize(path, HUGE_MAX_WIDTH, scaled_height(width, height))
            except OSError as e:
                logger.warning(f"Skipping resize of image {asset.image_id}: {e}")
        else:
            logger.warning(
                f"Skipping resize of image {asset.image_id}: "
                f"invalid dimensions {asset.width!r}x{asset.height!r}"
            )

    draft = AttachmentDraft(
        title=asset.post_title,
        description=asset.post_description,
        mime_type=_mime_type(response),
    )
    attachment_id = library.create_attachment(draft, path)
    library.generate_metadata(attachment_id, path)
    library.set_alt_text(attachment_id, asset.post_title)

    logger.info(f"Imported Shutterstock image {asset.image_id} as attachment {attachment_id}")
    return library.prepare_for_client(attachment_id)
