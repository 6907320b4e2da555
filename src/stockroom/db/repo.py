"""Repository pattern for database operations.

Encapsulates all SQLAlchemy queries. Returns domain entities (not
SQLAlchemy rows) to callers.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy.orm import Session

from stockroom.db.schema import Attachment, AttachmentMeta, Option, User
from stockroom.models.domain import (
    AttachmentDraft,
    AttachmentEntity,
    OptionScope,
    UserEntity,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session as DbSession
else:
    DbSession = Session

# Re-export for external use
__all__ = ["DbSession"]


# ============================================================================
# Converters: SQLAlchemy -> Domain
# ============================================================================


def _user_to_entity(user: User) -> UserEntity:
    """Convert SQLAlchemy User to domain entity."""
    roles = json.loads(user.roles_json) if user.roles_json else []
    return UserEntity(
        user_id=user.user_id,
        login=user.login,
        roles=[str(role) for role in roles],
    )


def _attachment_to_entity(attachment: Attachment) -> AttachmentEntity:
    """Convert SQLAlchemy Attachment to domain entity."""
    return AttachmentEntity(
        attachment_id=attachment.attachment_id,
        title=attachment.title,
        description=attachment.description,
        mime_type=attachment.mime_type,
        file_path=attachment.file_path,
        author_id=attachment.author_id,
        metadata=json.loads(attachment.metadata_json) if attachment.metadata_json else None,
        created_at=attachment.created_at,
        modified_at=attachment.modified_at,
    )


# ============================================================================
# Option Repository
# ============================================================================


def get_option_value(session: DbSession, scope: OptionScope, name: str) -> Any | None:
    """Get a decoded option value, or None if unset."""
    option = session.query(Option).filter(Option.scope == scope, Option.name == name).first()
    return json.loads(option.value_json) if option else None


def set_option_value(session: DbSession, scope: OptionScope, name: str, value: Any) -> None:
    """Create or replace an option value."""
    option = session.query(Option).filter(Option.scope == scope, Option.name == name).first()
    if option is None:
        option = Option(scope=scope, name=name, value_json=json.dumps(value))
        session.add(option)
    else:
        option.value_json = json.dumps(value)


# ============================================================================
# User Repository
# ============================================================================


def get_user_by_token(session: DbSession, access_token: str) -> UserEntity | None:
    """Get user by access token."""
    user = session.query(User).filter(User.access_token == access_token).first()
    return _user_to_entity(user) if user else None


def create_user(
    session: DbSession, login: str, access_token: str, roles: list[str]
) -> UserEntity:
    """Create a user and flush to obtain its id."""
    user = User(login=login, access_token=access_token, roles_json=json.dumps(roles))
    session.add(user)
    session.flush()
    return _user_to_entity(user)


# ============================================================================
# Attachment Repository
# ============================================================================


def create_attachment(
    session: DbSession,
    draft: AttachmentDraft,
    file_path: str,
    author_id: int | None = None,
) -> int:
    """Insert an attachment row and return its id."""
    attachment = Attachment(
        title=draft.title,
        description=draft.description,
        mime_type=draft.mime_type,
        file_path=file_path,
        author_id=author_id,
    )
    session.add(attachment)
    session.flush()
    return attachment.attachment_id


def get_attachment(session: DbSession, attachment_id: int) -> AttachmentEntity | None:
    """Get attachment by ID."""
    attachment = (
        session.query(Attachment).filter(Attachment.attachment_id == attachment_id).first()
    )
    return _attachment_to_entity(attachment) if attachment else None


def update_attachment_metadata(
    session: DbSession, attachment_id: int, metadata: dict[str, Any]
) -> None:
    """Replace generated metadata for an attachment."""
    attachment = (
        session.query(Attachment).filter(Attachment.attachment_id == attachment_id).first()
    )
    if attachment:
        attachment.metadata_json = json.dumps(metadata)
        attachment.modified_at = datetime.now(timezone.utc)


def set_attachment_meta(session: DbSession, attachment_id: int, key: str, value: str) -> None:
    """Create or replace one meta entry."""
    meta = (
        session.query(AttachmentMeta)
        .filter(AttachmentMeta.attachment_id == attachment_id, AttachmentMeta.meta_key == key)
        .first()
    )
    if meta is None:
        session.add(AttachmentMeta(attachment_id=attachment_id, meta_key=key, meta_value=value))
    else:
        meta.meta_value = value


def get_attachment_meta(session: DbSession, attachment_id: int, key: str) -> str | None:
    """Get one meta entry."""
    meta = (
        session.query(AttachmentMeta)
        .filter(AttachmentMeta.attachment_id == attachment_id, AttachmentMeta.meta_key == key)
        .first()
    )
    return meta.meta_value if meta else None


def commit(session: DbSession) -> None:
    """Commit current transaction."""
    session.commit()
