"""FastAPI application."""

from contextlib import asynccontextmanager

import logfire
from dishka import AsyncContainer
from fastapi import FastAPI

from market.application.usecase.admin import SeedAdminUseCase
from market.domain.service import AuthService, JWTService
from market.interface.api.routes import auth, health
from market.util.di.container import create_container, setup_di
from market.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fail fast on bad configuration, seed the admin account, then serve.

    Closing the container stops the signing key refresh and disposes the
    database engine.
    """
    container: AsyncContainer = app.state.dishka_container

    # APP-scoped services validate configuration when built
    await container.get(JWTService)
    await container.get(AuthService)

    async with container() as request_container:
        seed_admin = await request_container.get(SeedAdminUseCase)
        await seed_admin.execute()

    logfire.info("Application started")
    yield

    await container.close()
    logfire.info("Application stopped")


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        container: DI container to use; the production container by default

    Returns:
        Configured application
    """
    # Instrument httpx for outbound HTTP requests
    # (Logfire must be configured before instrumentation)
    instrument_httpx()

    app_instance = FastAPI(
        title="Marketplace Auth API",
        description="Registration, password login and Google sign-in for the marketplace",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    # Setup dependency injection
    # Settings are loaded from environment automatically
    setup_di(app_instance, container or create_container())

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
