"""Domain models for Stockroom.

Plain dataclasses passed between the api, gateway and media layers,
independent of SQLAlchemy rows and HTTP payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

OptionScope = Literal["site", "network"]


# ============================================================================
# Platform
# ============================================================================


@dataclass
class UserEntity:
    """Authenticated platform user."""

    user_id: int
    login: str
    roles: list[str] = field(default_factory=list)


@dataclass
class AttachmentEntity:
    """Media library record."""

    attachment_id: int
    title: str
    description: str
    mime_type: str
    file_path: str
    author_id: int | None = None
    metadata: dict[str, Any] | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None


@dataclass
class AttachmentDraft:
    """Fields for a new attachment, before it has an id."""

    title: str
    description: str
    mime_type: str


# ============================================================================
# Gateway
# ============================================================================


@dataclass(frozen=True)
class GatewayConfig:
    """Per-request configuration handed to the vendor client and permission check."""

    app_token: str
    role_permissions: dict[str, list[str]]
    application: str


@dataclass
class VendorResponse:
    """Successful vendor reply: status code and decoded JSON body."""

    status_code: int
    body: Any


@dataclass
class LicenseRequest:
    """Sanitized license purchase request."""

    subscription_id: str
    image_id: str
    size: str
    description: str
    contributor_name: str
    width: str
    height: str
    metadata: dict[str, str] = field(default_factory=dict)
    price_local_amount: float | None = None


@dataclass
class LicensedAsset:
    """A licensed download ready for import into the media library."""

    download_url: str
    filename: str
    size: str
    post_title: str
    post_description: str
    image_id: str
    width: str
    height: str
