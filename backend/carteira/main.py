"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from fastapi import FastAPI

from carteira import __version__
from carteira.api.routes import api_router
from carteira.config import get_settings
from carteira.core.logging import setup_logging
from carteira.core.telemetry import setup_telemetry
from carteira.db.init import init_database
from carteira.db.session import get_engine


def create_app(*, init_db: bool = True) -> FastAPI:
    """Build the application; ``init_db`` creates missing tables on startup."""

    settings = get_settings()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if init_db:
            await init_database()
        yield

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Return service readiness metadata."""

        return {
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "timezone": settings.timezone,
        }

    app.include_router(api_router)
    return app


def configure_app() -> FastAPI:
    setup_logging()
    application = create_app()
    setup_telemetry(get_settings(), app=application, engine=get_engine())
    return application


__all__ = ["create_app", "configure_app"]
