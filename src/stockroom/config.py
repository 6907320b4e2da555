"""Process-level settings read from the environment.

Per-site values (API token, role permissions) are not here; they live in
the option store and are read per request (see stockroom.core.options).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

VERSION = "0.1.0"

DEFAULT_API_URL = "https://api.shutterstock.com/v2"


@dataclass(frozen=True)
class Settings:
    """Environment-derived settings."""

    db_path: Path
    uploads_dir: Path
    uploads_url: str
    api_url: str
    namespace: str
    platform: str
    version: str

    @property
    def application(self) -> str:
        """Value of the vendor application header, e.g. "Stockroom/0.1.0"."""
        return f"{self.platform}/{self.version}"

    @property
    def option_name(self) -> str:
        """Name of the option row holding per-site settings."""
        return f"{self.namespace}_option_name"


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    """Build Settings from an environment mapping.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        Settings instance.
    """
    env = os.environ if environ is None else environ
    return Settings(
        db_path=Path(env.get("STOCKROOM_DB_PATH", "data/stockroom.db")),
        uploads_dir=Path(env.get("STOCKROOM_UPLOADS_DIR", "uploads")),
        uploads_url=env.get("STOCKROOM_UPLOADS_URL", "/uploads").rstrip("/"),
        api_url=env.get("STOCKROOM_API_URL", DEFAULT_API_URL).rstrip("/"),
        namespace=env.get("STOCKROOM_NAMESPACE", "shutterstock").strip("/"),
        platform=env.get("STOCKROOM_PLATFORM", "Stockroom"),
        version=env.get("STOCKROOM_VERSION", VERSION),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings for the running process."""
    return load_settings()
