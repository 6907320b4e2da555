"""License permissions derived from the current user's roles."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping


class Permission(str, Enum):
    """Permission strings stored in the role table."""

    LICENSE_STANDARD = "can_user_license_shutterstock_photos"
    LICENSE_EDITORIAL = "can_user_license_shutterstock_editorial_image"
    LICENSE_ALL = "can_user_license_all_shutterstock_images"


_FALSE_STRINGS = {"", "0", "false", "no", "off"}


def effective_permissions(
    roles: Iterable[str],
    role_permissions: Mapping[str, Iterable[str]],
) -> list[str]:
    """Union of the permissions granted to each role, first-seen order.

    Roles missing from the table contribute nothing.
    """
    permissions: list[str] = []
    for role in roles:
        for permission in role_permissions.get(role) or ():
            if permission not in permissions:
                permissions.append(permission)
    return permissions


def is_flag_set(value: Any) -> bool:
    """Interpret a request flag such as is_editorial."""
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def can_license(permissions: Iterable[str], is_editorial: bool = False) -> bool:
    """Whether a permission set may use the licensing routes.

    Args:
        permissions: Effective permissions of the user.
        is_editorial: Whether the request concerns an editorial image.

    Returns:
        True if license-all is held, or the permission matching the
        editorial flag is held.
    """
    held = set(permissions)

    if Permission.LICENSE_ALL.value in held:
        return True
    if is_editorial:
        return Permission.LICENSE_EDITORIAL.value in held
    return Permission.LICENSE_STANDARD.value in held
