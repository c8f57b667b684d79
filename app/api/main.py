from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

import models
from api.errors import register_exception_handlers
from api.middleware import NavigationGateMiddleware
from api.routes import auth, health, pages
from auth import AuthService
from guard import GuardSettings


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    auth_service: AuthService | None = None,
    settings: GuardSettings | None = None,
) -> FastAPI:
    """Application factory for the console backend."""
    configure_logging()
    logger = logging.getLogger(__name__)

    auth_service = auth_service or AuthService()
    settings = settings or GuardSettings.from_env()

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if os.getenv("AUTO_CREATE_SCHEMA") == "1":
            try:
                models.Base.metadata.create_all(bind=models.engine)
            except Exception:  # pragma: no cover - safety
                logger.exception("Failed to create schema on startup")
        yield

    app = FastAPI(title="Business Console", version="0.1.0", lifespan=lifespan)
    app.state.auth_service = auth_service
    app.state.guard_settings = settings

    register_exception_handlers(app)
    app.add_middleware(NavigationGateMiddleware, auth_service=auth_service, settings=settings)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(pages.router)

    return app


app = create_app()
