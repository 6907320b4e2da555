#!/usr/bin/env python3
"""Configure a Stockroom site from the command line.

Usage:
    python scripts/configure.py token <app_token> [--network]
    python scripts/configure.py grant <role> <permission>... [--network]
    python scripts/configure.py add-user <login> <role>...

Settings are written to the option named ``<namespace>_option_name``;
site values take precedence over network values at request time.
"""

from __future__ import annotations

import argparse
import secrets
import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from stockroom.config import get_settings  # noqa: E402
from stockroom.core.permissions import Permission  # noqa: E402
from stockroom.db import repo  # noqa: E402
from stockroom.db.session import init_db, session_scope  # noqa: E402

PERMISSION_ALIASES = {
    "standard": Permission.LICENSE_STANDARD.value,
    "editorial": Permission.LICENSE_EDITORIAL.value,
    "all": Permission.LICENSE_ALL.value,
}


def _update_option(scope: str, field: str, value) -> None:
    settings = get_settings()
    with session_scope(settings.db_path) as session:
        option = repo.get_option_value(session, scope, settings.option_name)
        if not isinstance(option, dict):
            option = {}
        option[field] = value
        repo.set_option_value(session, scope, settings.option_name, option)


def set_token(args: argparse.Namespace) -> int:
    """Store the Shutterstock API token."""
    scope = "network" if args.network else "site"
    _update_option(scope, "app_token", args.app_token)
    print(f"Stored app_token at {scope} scope")
    return 0


def grant(args: argparse.Namespace) -> int:
    """Replace the permission list of a role."""
    scope = "network" if args.network else "site"
    permissions = [PERMISSION_ALIASES.get(p, p) for p in args.permissions]

    settings = get_settings()
    with session_scope(settings.db_path) as session:
        option = repo.get_option_value(session, scope, settings.option_name)
        user_settings = option.get("user_settings", {}) if isinstance(option, dict) else {}

    user_settings[args.role] = permissions
    _update_option(scope, "user_settings", user_settings)
    print(f"Role {args.role}: {', '.join(permissions) or '(none)'}")
    return 0


def add_user(args: argparse.Namespace) -> int:
    """Create a user and print its access token."""
    settings = get_settings()
    token = secrets.token_urlsafe(32)
    with session_scope(settings.db_path) as session:
        user = repo.create_user(session, args.login, token, args.roles)
    print(f"Created user {user.login} (id {user.user_id})")
    print(f"X-Stockroom-User: {token}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    commands = parser.add_subparsers(dest="command", required=True)

    token_cmd = commands.add_parser("token", help="store the API token")
    token_cmd.add_argument("app_token")
    token_cmd.add_argument("--network", action="store_true")
    token_cmd.set_defaults(func=set_token)

    grant_cmd = commands.add_parser("grant", help="set a role's permissions")
    grant_cmd.add_argument("role")
    grant_cmd.add_argument(
        "permissions", nargs="*", help="standard, editorial, all or a raw permission string"
    )
    grant_cmd.add_argument("--network", action="store_true")
    grant_cmd.set_defaults(func=grant)

    user_cmd = commands.add_parser("add-user", help="create a user")
    user_cmd.add_argument("login")
    user_cmd.add_argument("roles", nargs="+")
    user_cmd.set_defaults(func=add_user)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    init_db(get_settings().db_path)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
