"""Subscription filtering.

Only subscriptions with a supported license kind that have not expired
are offered to the editor.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

SUPPORTED_LICENSES = (
    "standard",
    "enhanced",
    "image",
    "multi_share",
    "premier",
    "premier_digital",
    "media",
    "media_digital",
)


def parse_expiration(value: str) -> datetime | None:
    """Parse a vendor timestamp; naive values are taken as UTC.

    Returns:
        Aware datetime, or None if the value cannot be parsed.
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def is_expired(expiration_time: Any, now: datetime | None = None) -> bool:
    """Whether a subscription's expiration time lies in the past.

    An empty or missing expiration never expires. A value that cannot be
    parsed counts as expired.
    """
    if not expiration_time:
        return False
    if now is None:
        now = datetime.now(timezone.utc)

    expires_at = parse_expiration(str(expiration_time))
    if expires_at is None:
        return True
    return expires_at < now


def filter_subscriptions(
    subscriptions: Iterable[Any] | None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """Keep supported, unexpired subscriptions in their original order.

    Args:
        subscriptions: The vendor's ``data`` array.
        now: Reference time (defaults to current UTC time).

    Returns:
        New list of the surviving subscription dicts.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return [
        subscription
        for subscription in subscriptions or ()
        if isinstance(subscription, dict)
        and subscription.get("license") in SUPPORTED_LICENSES
        and not is_expired(subscription.get("expiration_time"), now)
    ]
