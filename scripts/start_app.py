#!/usr/bin/env python3
"""Serve the auth API, reporting startup failures to Logfire."""

import sys

import logfire
import uvicorn

from market.config import Settings
from market.util.logging import setup_logging
from market.util.observability import configure_logfire


def main() -> int:
    """Validate configuration, then hand over to uvicorn."""
    settings = Settings()

    setup_logging(settings)
    configure_logfire(settings)

    try:
        # Missing JWT or Google settings stop the process before it binds
        settings.validate_required()

        logfire.info("Starting auth API", environment=settings.environment)
        uvicorn.run(
            "market.interface.api.app:app",
            host="0.0.0.0",
            port=8000,
            log_level="debug" if settings.debug else "info",
        )
        return 0

    except Exception as e:
        logfire.error(
            "Auth API startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the process exits non-zero
        raise


if __name__ == "__main__":
    sys.exit(main())
