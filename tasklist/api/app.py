"""
FastAPI application for the task list service.

``create_app()`` validates configuration, wires storage into the services
and mounts the routers under ``settings.api_prefix``. Missing secrets or
database settings raise ConfigError here, so the server never starts
half-configured.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tasklist.api.errors import install_error_handlers
from tasklist.api.tasks import router as tasks_router
from tasklist.auth import AuthService, TokenIssuer, auth_router
from tasklist.config import Settings, get_settings
from tasklist.integrations.sentry import init_sentry
from tasklist.services import TaskService
from tasklist.storage import StorageProvider, create_storage

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to environment settings
        storage: Defaults to the backend named by settings.database_url

    Raises:
        ConfigError: Required settings are missing or invalid
    """
    settings = settings or get_settings()
    settings.validate_required()

    storage = storage or create_storage(settings)
    token_issuer = TokenIssuer.from_settings(settings)

    # =========================================================================
    # Lifespan
    # =========================================================================

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize and cleanup app resources."""
        if init_sentry(settings):
            logger.info("Sentry error tracking enabled")

        await storage.initialize()
        logger.info(f"Task list API starting in {settings.environment} mode")

        yield

        await storage.close()
        logger.info("Task list API shutting down")

    # =========================================================================
    # App Setup
    # =========================================================================

    app = FastAPI(
        title="Task List API",
        description="Authenticated per-user task lists",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.token_issuer = token_issuer
    app.state.auth_service = AuthService(storage.users, token_issuer)
    app.state.task_service = TaskService(storage.tasks)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    # Routers
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(tasks_router, prefix=settings.api_prefix)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app
