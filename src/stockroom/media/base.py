"""Media library capability interface.

The gateway only needs a narrow set of storage operations:
store, resize, create_attachment, and the metadata/representation
steps that follow. Backends must NOT call the vendor API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from stockroom.models.domain import AttachmentDraft


class MediaLibrary(ABC):
    """Abstract base class for media storage backends."""

    @abstractmethod
    def store(self, data: bytes, filename: str) -> Path:
        """Write raw bytes to upload storage.

        Args:
            data: File contents.
            filename: Desired file name (may be made unique).

        Returns:
            Path of the stored file.
        """

    @abstractmethod
    def resize(self, path: Path, width: int, height: int) -> Path:
        """Write a copy of an image cropped to exactly width x height.

        Returns:
            Path of the resized copy.

        Raises:
            OSError: If the file is not a readable image.
        """

    @abstractmethod
    def create_attachment(self, draft: AttachmentDraft, path: Path) -> int:
        """Register a stored file as an attachment and return its id."""

    @abstractmethod
    def generate_metadata(self, attachment_id: int, path: Path) -> dict[str, Any]:
        """Generate derivative sizes and store the attachment metadata."""

    @abstractmethod
    def set_alt_text(self, attachment_id: int, text: str) -> None:
        """Set the accessible text of an attachment."""

    @abstractmethod
    def prepare_for_client(self, attachment_id: int) -> dict[str, Any]:
        """Representation of an attachment for the editor UI."""
