"""Pydantic models for the Stockroom HTTP surface."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class LicenseRequestBody(BaseModel):
    """Inbound license request.

    Fields are untyped on purpose: they are sanitized as text downstream
    and missing values degrade to empty strings instead of failing.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    subscription_id: Any = None
    size: Any = None
    id: Any = None
    description: Any = None
    contributor_name: Any = Field(default=None, alias="contributorName")
    width: Any = None
    height: Any = None
    metadata: Any = None
    price_per_download: Any = Field(default=None, alias="pricePerDownload")
    is_editorial: Any = None


class AttachmentSize(BaseModel):
    """One rendition of an attachment."""

    url: str
    width: int
    height: int
    orientation: Literal["landscape", "portrait"]


class AttachmentDetail(BaseModel):
    """Attachment prepared for client consumption."""

    id: int
    title: str
    filename: str
    url: str
    alt: str
    description: str
    caption: str
    name: str
    status: str
    uploadedTo: int
    date: int
    modified: int
    mime: str
    type: str
    subtype: str
    author: str
    filesizeInBytes: int | None
    width: int | None
    height: int | None
    orientation: Literal["landscape", "portrait"] | None
    sizes: dict[str, AttachmentSize]


class LicenseSuccess(BaseModel):
    """Envelope for a completed license and import."""

    success: Literal[True] = True
    data: AttachmentDetail


class ErrorEnvelope(BaseModel):
    """Envelope for a failed vendor or transport call."""

    success: Literal[False] = False
    data: Any = None
