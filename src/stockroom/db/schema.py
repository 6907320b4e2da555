"""Database schema for Stockroom.

Host-platform tables: options, users, and the media library
(attachments plus their key/value meta).
"""

from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Option(Base):
    """Named configuration value at site or network scope.

    Invariant: UNIQUE(scope, name)
    """

    __tablename__ = "options"

    option_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    scope: Mapped[str] = mapped_column(String(16), nullable=False, default="site")
    name: Mapped[str] = mapped_column(String(191), nullable=False)
    value_json: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (UniqueConstraint("scope", "name", name="uq_option_scope_name"),)


class User(Base):
    """Platform user with an access token and a role list."""

    __tablename__ = "users"

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    login: Mapped[str] = mapped_column(String(60), nullable=False, unique=True)
    access_token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    roles_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")


class Attachment(Base):
    """Media library record for an uploaded file."""

    __tablename__ = "attachments"

    attachment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    file_path: Mapped[str] = mapped_column(String(512), nullable=False)
    author_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.user_id"), nullable=True
    )
    metadata_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    modified_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )


class AttachmentMeta(Base):
    """Key/value meta for an attachment (e.g. alt text).

    Invariant: UNIQUE(attachment_id, meta_key)
    """

    __tablename__ = "attachment_meta"

    meta_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    attachment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("attachments.attachment_id"), nullable=False
    )
    meta_key: Mapped[str] = mapped_column(String(255), nullable=False)
    meta_value: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("attachment_id", "meta_key", name="uq_attachment_meta_key"),
    )
