"""Local-disk media library.

Files go under ``<uploads_dir>/<year>/<month>/``; attachment rows and
meta are written through the repository. Pillow handles resizing and
derivative sizes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError

from stockroom.db import repo
from stockroom.db.repo import DbSession
from stockroom.media.base import MediaLibrary
from stockroom.models.domain import AttachmentDraft, AttachmentEntity
from stockroom.models.types import AttachmentDetail, AttachmentSize

logger = logging.getLogger(__name__)

ALT_TEXT_KEY = "_wp_attachment_image_alt"

# name -> (max width, max height, crop)
DERIVATIVE_SIZES: dict[str, tuple[int, int, bool]] = {
    "thumbnail": (150, 150, True),
    "medium": (300, 300, False),
    "medium_large": (768, 0, False),
    "large": (1024, 1024, False),
}


def _orientation(width: int, height: int) -> str:
    return "portrait" if height > width else "landscape"


def _fit_within(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Scale (width, height) down to fit a box; 0 means unbounded."""
    ratios = []
    if max_width and width > max_width:
        ratios.append(max_width / width)
    if max_height and height > max_height:
        ratios.append(max_height / height)
    if not ratios:
        return width, height
    ratio = min(ratios)
    return max(1, round(width * ratio)), max(1, round(height * ratio))


class LocalMediaLibrary(MediaLibrary):
    """MediaLibrary backed by the local filesystem and the database."""

    def __init__(
        self,
        session: DbSession,
        uploads_dir: Path,
        uploads_url: str,
        author_id: int | None = None,
    ):
        """Initialize library.

        Args:
            session: Database session for attachment rows.
            uploads_dir: Root directory for stored files.
            uploads_url: Public URL prefix matching uploads_dir.
            author_id: User recorded as the attachment author.
        """
        self.session = session
        self.uploads_dir = Path(uploads_dir)
        self.uploads_url = uploads_url.rstrip("/")
        self.author_id = author_id

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _upload_subdir(self) -> Path:
        now = datetime.now(timezone.utc)
        subdir = self.uploads_dir / f"{now:%Y}" / f"{now:%m}"
        subdir.mkdir(parents=True, exist_ok=True)
        return subdir

    @staticmethod
    def _unique_path(directory: Path, filename: str) -> Path:
        """First free path for filename, appending -1, -2... on collision."""
        candidate = directory / filename
        stem, suffix = candidate.stem, candidate.suffix
        counter = 1
        while candidate.exists():
            candidate = directory / f"{stem}-{counter}{suffix}"
            counter += 1
        return candidate

    def _relative(self, path: Path) -> str:
        return Path(path).resolve().relative_to(self.uploads_dir.resolve()).as_posix()

    def _url(self, path: Path) -> str:
        return f"{self.uploads_url}/{self._relative(path)}"

    def store(self, data: bytes, filename: str) -> Path:
        path = self._unique_path(self._upload_subdir(), Path(filename).name)
        path.write_bytes(data)
        logger.debug(f"Stored {len(data)} bytes at {path}")
        return path

    def resize(self, path: Path, width: int, height: int) -> Path:
        path = Path(path)
        target = self._unique_path(path.parent, f"{path.stem}-scaled{path.suffix}")

        with Image.open(path) as image:
            resized = ImageOps.fit(image, (width, height), Image.LANCZOS)
            resized.save(target, format=image.format)

        logger.info(f"Resized {path.name} to {width}x{height}")
        return target

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def create_attachment(self, draft: AttachmentDraft, path: Path) -> int:
        return repo.create_attachment(self.session, draft, str(path), self.author_id)

    def _make_derivative(
        self, image: Image.Image, path: Path, name: str
    ) -> dict[str, Any] | None:
        max_width, max_height, crop = DERIVATIVE_SIZES[name]
        width, height = image.size

        if crop:
            if width <= max_width and height <= max_height:
                return None
            size = (min(width, max_width), min(height, max_height))
            derived = ImageOps.fit(image, size, Image.LANCZOS)
        else:
            size = _fit_within(width, height, max_width, max_height)
            if size == (width, height):
                return None
            derived = image.resize(size, Image.LANCZOS)

        target = path.with_name(f"{path.stem}-{size[0]}x{size[1]}{path.suffix}")
        derived.save(target, format=image.format)

        return {
            "file": target.name,
            "width": size[0],
            "height": size[1],
            "mime-type": Image.MIME.get(image.format or "", ""),
        }

    def generate_metadata(self, attachment_id: int, path: Path) -> dict[str, Any]:
        path = Path(path)
        metadata: dict[str, Any] = {
            "file": self._relative(path),
            "filesize": path.stat().st_size,
        }

        try:
            with Image.open(path) as image:
                image.load()
                metadata["width"], metadata["height"] = image.size
                sizes = {}
                for name in DERIVATIVE_SIZES:
                    derived = self._make_derivative(image, path, name)
                    if derived:
                        sizes[name] = derived
                metadata["sizes"] = sizes
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"No image metadata for attachment {attachment_id}: {e}")

        repo.update_attachment_metadata(self.session, attachment_id, metadata)
        return metadata

    def set_alt_text(self, attachment_id: int, text: str) -> None:
        repo.set_attachment_meta(self.session, attachment_id, ALT_TEXT_KEY, text)

    # ------------------------------------------------------------------
    # Client representation
    # ------------------------------------------------------------------

    def _sizes(self, attachment: AttachmentEntity) -> dict[str, AttachmentSize]:
        metadata = attachment.metadata or {}
        path = Path(attachment.file_path)
        width, height = metadata.get("width"), metadata.get("height")
        if not width or not height:
            return {}

        sizes = {}
        for name, size in (metadata.get("sizes") or {}).items():
            sizes[name] = AttachmentSize(
                url=self._url(path.with_name(size["file"])),
                width=size["width"],
                height=size["height"],
                orientation=_orientation(size["width"], size["height"]),
            )
        sizes["full"] = AttachmentSize(
            url=self._url(path),
            width=width,
            height=height,
            orientation=_orientation(width, height),
        )
        return sizes

    def prepare_for_client(self, attachment_id: int) -> dict[str, Any]:
        attachment = repo.get_attachment(self.session, attachment_id)
        if attachment is None:
            raise ValueError(f"Attachment not found: {attachment_id}")

        metadata = attachment.metadata or {}
        path = Path(attachment.file_path)
        mime_type, _, subtype = attachment.mime_type.partition("/")
        width, height = metadata.get("width"), metadata.get("height")

        detail = AttachmentDetail(
            id=attachment.attachment_id,
            title=attachment.title,
            filename=path.name,
            url=self._url(path),
            alt=repo.get_attachment_meta(self.session, attachment_id, ALT_TEXT_KEY) or "",
            description=attachment.description,
            caption="",
            name=path.stem,
            status="inherit",
            uploadedTo=0,
            date=int(attachment.created_at.timestamp() * 1000) if attachment.created_at else 0,
            modified=(
                int(attachment.modified_at.timestamp() * 1000) if attachment.modified_at else 0
            ),
            mime=attachment.mime_type,
            type=mime_type,
            subtype=subtype,
            author=str(attachment.author_id or ""),
            filesizeInBytes=metadata.get("filesize"),
            width=width,
            height=height,
            orientation=_orientation(width, height) if width and height else None,
            sizes=self._sizes(attachment),
        )
        return detail.model_dump()
