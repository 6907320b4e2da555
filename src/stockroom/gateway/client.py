"""Shutterstock REST API client.

Single-attempt calls with fixed timeouts. A non-200 status, or a body
carrying an ``errors`` field, raises VendorError; transport failures
surface as the original httpx.TransportError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from stockroom.config import DEFAULT_API_URL
from stockroom.models.domain import GatewayConfig, VendorResponse

logger = logging.getLogger(__name__)

LOOKUP_TIMEOUT = 3.0
LICENSE_TIMEOUT = 5.0


class VendorError(Exception):
    """The vendor answered with an error status or an ``errors`` body."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Shutterstock API returned {status_code}")


def decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body; anything that is not JSON decodes to None."""
    try:
        return response.json()
    except ValueError:
        return None


class VendorClient:
    """Thin wrapper around the vendor endpoints used by the gateway."""

    def __init__(
        self,
        config: GatewayConfig,
        http: httpx.Client,
        api_url: str = DEFAULT_API_URL,
    ):
        """Initialize client.

        Args:
            config: Token and application identifier for this request.
            http: Shared HTTP client (also used for asset downloads).
            api_url: Vendor base URL, without trailing slash.
        """
        self.config = config
        self.http = http
        self.api_url = api_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.app_token}",
            "x-shutterstock-application": self.config.application,
        }

    def _check(self, response: httpx.Response) -> VendorResponse:
        body = decode_body(response)

        if response.status_code != 200 or (isinstance(body, dict) and "errors" in body):
            logger.warning(
                f"Shutterstock API {response.request.method} {response.request.url.path} "
                f"failed with {response.status_code}"
            )
            raise VendorError(response.status_code, body)

        logger.info(
            f"Shutterstock API {response.request.method} {response.request.url.path} "
            f"-> {response.status_code}"
        )
        return VendorResponse(status_code=response.status_code, body=body)

    def get(self, path: str, params: dict[str, str] | None = None) -> VendorResponse:
        """GET a vendor endpoint with the lookup timeout."""
        response = self.http.get(
            f"{self.api_url}{path}",
            params=params,
            headers=self._headers(),
            timeout=LOOKUP_TIMEOUT,
        )
        return self._check(response)

    def get_subscriptions(self) -> VendorResponse:
        """GET /user/subscriptions."""
        return self.get("/user/subscriptions")

    def get_image(self, image_id: str) -> VendorResponse:
        """GET /images/{id}?view=full."""
        return self.get(f"/images/{image_id}", params={"view": "full"})

    def get_contributor(self, contributor_id: str) -> VendorResponse:
        """GET /contributors?id={id}."""
        return self.get("/contributors", params={"id": contributor_id})

    def license_images(self, subscription_id: str, body: dict[str, Any]) -> VendorResponse:
        """POST /images/licenses?subscription_id={id}.

        Args:
            subscription_id: Subscription to charge.
            body: Request body as built by build_license_body.

        Returns:
            VendorResponse with the license result.

        Raises:
            VendorError: On non-200 status or an ``errors`` body.
        """
        response = self.http.post(
            f"{self.api_url}/images/licenses",
            params={"subscription_id": subscription_id},
            json=body,
            headers=self._headers(),
            timeout=LICENSE_TIMEOUT,
        )
        return self._check(response)
