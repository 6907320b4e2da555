"""Plain-text sanitizing for inbound request fields.

Every value pulled from a request, or forwarded to the vendor, goes
through sanitize_text_field first.
"""

from __future__ import annotations

import html
import re
from typing import Any

_LESS_THAN = re.compile(r"<[^>]*?((?=<)|>|$)")
_SCRIPT_STYLE = re.compile(r"<(script|style)[^>]*?>.*?</\1>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"[\r\n\t ]+")
_OCTET = re.compile(r"%[a-f0-9]{2}", re.IGNORECASE)
_SPACES = re.compile(r" +")


def _to_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return ""
    return str(value)


def _escape_stray_less_than(match: re.Match[str]) -> str:
    text = match.group(0)
    if ">" in text:
        return text
    return html.escape(text)


def strip_all_tags(text: str) -> str:
    """Remove markup, dropping script and style blocks with their content."""
    text = _SCRIPT_STYLE.sub("", text)
    return _TAG.sub("", text).strip()


def sanitize_text_field(value: Any) -> str:
    """Reduce a value to a single line of plain text.

    - Non-scalar values and None become "".
    - Characters that cannot be encoded as UTF-8 are dropped.
    - Tags are stripped; a "<" that does not open a tag is escaped.
    - Line breaks, tabs and runs of spaces collapse to one space.
    - Percent-encoded octets are removed.

    Args:
        value: Raw value from a request body, query or path.

    Returns:
        Sanitized string.
    """
    text = _to_text(value)
    text = text.encode("utf-8", "ignore").decode("utf-8")

    if "<" in text:
        text = _LESS_THAN.sub(_escape_stray_less_than, text)
        text = strip_all_tags(text)
        text = text.replace("<\n", "&lt;\n")

    text = _WHITESPACE.sub(" ", text).strip()

    found = False
    while True:
        match = _OCTET.search(text)
        if match is None:
            break
        text = text.replace(match.group(0), "")
        found = True

    if found:
        text = _SPACES.sub(" ", text).strip()

    return text


def sanitize_mapping(value: Any) -> dict[str, str]:
    """Sanitize every key and value of a mapping.

    Anything that is not a mapping yields an empty dict.
    """
    if not isinstance(value, dict):
        return {}
    return {sanitize_text_field(key): sanitize_text_field(item) for key, item in value.items()}
