"""Option lookup with site-over-network precedence."""

from __future__ import annotations

from typing import Any

from stockroom.config import Settings
from stockroom.db import repo
from stockroom.db.repo import DbSession
from stockroom.models.domain import GatewayConfig


def get_option(session: DbSession, option_name: str, field: str) -> Any:
    """Read one field of a settings option.

    The site-level value wins when it has the field; the network-level
    value is used otherwise. A missing field yields "".
    """
    for scope in ("site", "network"):
        value = repo.get_option_value(session, scope, option_name)
        if isinstance(value, dict) and field in value:
            return value[field]
    return ""


def _role_permissions(value: Any) -> dict[str, list[str]]:
    if not isinstance(value, dict):
        return {}
    return {
        str(role): [str(p) for p in permissions]
        for role, permissions in value.items()
        if isinstance(permissions, (list, tuple))
    }


def load_gateway_config(session: DbSession, settings: Settings) -> GatewayConfig:
    """Build the per-request gateway configuration from the option store."""
    token = get_option(session, settings.option_name, "app_token")
    user_settings = get_option(session, settings.option_name, "user_settings")

    return GatewayConfig(
        app_token=str(token or ""),
        role_permissions=_role_permissions(user_settings),
        application=settings.application,
    )
