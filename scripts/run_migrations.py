#!/usr/bin/env python3
"""Apply the auth schema migrations, reporting failures to Logfire.

Usage:
    python scripts/run_migrations.py            # upgrade to head
    python scripts/run_migrations.py <revision> # upgrade to a given revision
"""

import sys

import logfire
from alembic import command
from alembic.config import Config

from market.config import Settings
from market.util.logging import setup_logging
from market.util.observability import configure_logfire


def main(argv: list[str]) -> int:
    """Upgrade the database schema to the requested revision."""
    settings = Settings()
    target = argv[1] if len(argv) > 1 else "head"

    setup_logging(settings)
    configure_logfire(settings)

    try:
        with logfire.span("run_migrations", target=target):
            # env.py reads the database URL from settings
            alembic_cfg = Config("alembic.ini")
            command.upgrade(alembic_cfg, target)

        logfire.info("Database migrations completed", target=target)
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            target=target,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the deployment stops before serving on a broken schema
        raise


if __name__ == "__main__":
    sys.exit(main(sys.argv))
