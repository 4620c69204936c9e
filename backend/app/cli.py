"""Operational commands.

Signup requires an authenticated admin, so the first account of a fresh
deployment is created here instead::

    python -m app.cli create-admin --email owner@example.com --password s3cret!
"""

from __future__ import annotations

import argparse
import logging
import sys

from app import models  # noqa: F401
from app.config import Settings
from app.database import create_db_engine, create_session_factory, create_tables
from app.services import admin_service
from app.utils.exceptions import EmailConflictError, InvalidAdminInputError

logger = logging.getLogger(__name__)


def create_admin(settings: Settings, email: str, password: str, name: str | None) -> int:
    engine = create_db_engine(settings.database_url)
    try:
        create_tables(engine)
        session_factory = create_session_factory(engine)
        with session_factory() as db:
            try:
                admin = admin_service.create_admin(db, email, password, name)
            except (InvalidAdminInputError, EmailConflictError) as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
            print(f"Created admin {admin.email} (id={admin.id})")
            return 0
    finally:
        engine.dispose()


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    parser = argparse.ArgumentParser(description="Real estate listings admin tools")
    subcommands = parser.add_subparsers(dest="command", required=True)

    create = subcommands.add_parser("create-admin", help="Create an admin account")
    create.add_argument("--email", required=True)
    create.add_argument("--password", required=True)
    create.add_argument("--name", default=None)

    args = parser.parse_args(argv)
    settings = settings or Settings()
    logging.basicConfig(level=settings.log_level.upper())

    if args.command == "create-admin":
        return create_admin(settings, args.email, args.password, args.name)
    return 2


if __name__ == "__main__":
    sys.exit(main())
