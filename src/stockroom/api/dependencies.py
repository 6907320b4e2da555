"""Request-scoped dependencies: user, configuration, clients, permissions."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from fastapi import Depends, Header, HTTPException, Request

from stockroom.api.app import get_app_settings, get_db_session, get_http_client
from stockroom.config import Settings
from stockroom.core.options import load_gateway_config
from stockroom.core.permissions import can_license, effective_permissions, is_flag_set
from stockroom.db import repo
from stockroom.db.repo import DbSession
from stockroom.gateway.client import VendorClient
from stockroom.gateway.service import StockGateway
from stockroom.media.local import LocalMediaLibrary
from stockroom.models.domain import GatewayConfig, UserEntity

logger = logging.getLogger(__name__)

USER_HEADER = "X-Stockroom-User"


def get_current_user(
    token: str | None = Header(default=None, alias=USER_HEADER),
    session: DbSession = Depends(get_db_session),
) -> UserEntity:
    """Resolve the authenticated user.

    Raises:
        HTTPException: 401 if the token is missing or unknown.
    """
    user = repo.get_user_by_token(session, token) if token else None
    if user is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "rest_not_logged_in", "message": "You are not currently logged in."},
        )
    return user


def get_gateway_config(
    session: DbSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> GatewayConfig:
    """Token and role table for this request."""
    return load_gateway_config(session, settings)


def get_gateway(
    config: GatewayConfig = Depends(get_gateway_config),
    http: httpx.Client = Depends(get_http_client),
    settings: Settings = Depends(get_app_settings),
) -> StockGateway:
    """Gateway bound to this request's configuration."""
    return StockGateway(VendorClient(config, http, api_url=settings.api_url))


def get_media_library(
    user: UserEntity = Depends(get_current_user),
    session: DbSession = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> LocalMediaLibrary:
    """Media library writing on behalf of the current user."""
    return LocalMediaLibrary(
        session,
        uploads_dir=settings.uploads_dir,
        uploads_url=settings.uploads_url,
        author_id=user.user_id,
    )


async def read_json_body(request: Request) -> dict[str, Any]:
    """Decoded JSON object body; anything else decodes to {}."""
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else {}
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


def _check_license_permission(
    user: UserEntity, config: GatewayConfig, is_editorial: bool
) -> UserEntity:
    permissions = effective_permissions(user.roles, config.role_permissions)
    if not can_license(permissions, is_editorial):
        logger.warning(f"License permission denied for user {user.login}")
        raise HTTPException(
            status_code=403,
            detail={"code": "rest_forbidden", "message": "Sorry, you are not allowed to do that."},
        )
    return user


def require_lookup_permission(
    user: UserEntity = Depends(get_current_user),
    config: GatewayConfig = Depends(get_gateway_config),
) -> UserEntity:
    """Permission gate for the read-only routes (never editorial)."""
    return _check_license_permission(user, config, is_editorial=False)


def require_license_permission(
    request: Request,
    body: dict[str, Any] = Depends(read_json_body),
    user: UserEntity = Depends(get_current_user),
    config: GatewayConfig = Depends(get_gateway_config),
) -> UserEntity:
    """Permission gate for licensing; is_editorial from the body, else the query."""
    flag = body.get("is_editorial", request.query_params.get("is_editorial"))
    return _check_license_permission(user, config, is_editorial=is_flag_set(flag))
