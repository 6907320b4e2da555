"""Gateway facade over the Shutterstock API.

Per route: one vendor call, a JSON reshape, and for licensing a
hand-off to the media importer. Nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any

from stockroom.core.subscriptions import filter_subscriptions
from stockroom.gateway.client import VendorClient, VendorError
from stockroom.gateway.licensing import (
    build_licensed_asset,
    build_license_body,
    extract_download_url,
)
from stockroom.media.base import MediaLibrary
from stockroom.media.importer import import_licensed_image
from stockroom.models.domain import LicenseRequest, VendorResponse

logger = logging.getLogger(__name__)


class StockGateway:
    """Proxies editor requests to the vendor API."""

    def __init__(self, client: VendorClient):
        self.client = client

    def list_subscriptions(self) -> VendorResponse:
        """Supported, unexpired subscriptions of the configured account."""
        response = self.client.get_subscriptions()
        data = response.body.get("data") if isinstance(response.body, dict) else None
        return VendorResponse(
            status_code=response.status_code,
            body=filter_subscriptions(data),
        )

    def image_details(self, image_id: str) -> VendorResponse:
        """Full image details, verbatim."""
        return self.client.get_image(image_id)

    def contributor_details(self, contributor_id: str) -> VendorResponse:
        """Contributor details, verbatim."""
        return self.client.get_contributor(contributor_id)

    def license_image(
        self, request: LicenseRequest, library: MediaLibrary
    ) -> tuple[int, dict[str, Any]]:
        """License one image and import it into the media library.

        Args:
            request: Sanitized license request.
            library: Media backend that receives the download.

        Returns:
            Tuple of (vendor status code, attachment representation).

        Raises:
            VendorError: If the vendor rejects the license, or the reply
                has no download URL. The importer is not called.
        """
        body = build_license_body(request)
        logger.debug(f"Licensing image {request.image_id} at size {request.size!r}")

        response = self.client.license_images(request.subscription_id, body)

        download_url = extract_download_url(response.body)
        if download_url is None:
            logger.warning(f"License reply for image {request.image_id} has no download URL")
            raise VendorError(502, response.body)

        asset = build_licensed_asset(request, download_url)
        attachment = import_licensed_image(asset, self.client.http, library)
        return response.status_code, attachment
