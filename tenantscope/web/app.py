"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI

from tenantscope.config.logging import setup_logging
from tenantscope.config.settings import get_settings
from tenantscope.storage.repositories.directory import DatabaseDirectoryStore
from tenantscope.web.dependencies import (
    create_context_resolver,
    create_directory_store,
    create_permission_evaluator,
    create_session_auth,
)
from tenantscope.web.health import check_health
from tenantscope.web.middleware import RequestIDMiddleware, TenantContextMiddleware
from tenantscope.web.routes.auth import router as auth_router
from tenantscope.web.routes.context import router as context_router

if TYPE_CHECKING:
    from tenantscope.config.settings import Settings
    from tenantscope.storage.repositories.directory import DirectoryStore

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Dispose the directory engine on shutdown."""
    yield
    store = app.state.directory_store
    if isinstance(store, DatabaseDirectoryStore):
        await store.engine.dispose()
        logger.info("directory_engine_disposed")


def create_app(
    settings: Settings | None = None,
    store: DirectoryStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Everything is built from ``settings``; nothing below reads the
    environment again.
    """
    settings = settings or get_settings()
    setup_logging(log_level=settings.log_level, json_output=not settings.debug)

    app = FastAPI(
        title="tenantscope",
        description="Tenant context resolution and authorization service",
        version="0.1.0",
        lifespan=lifespan,
    )

    store = store if store is not None else create_directory_store(settings)
    app.state.settings = settings
    app.state.directory_store = store
    app.state.session_auth = create_session_auth(settings)
    app.state.context_resolver = create_context_resolver(store, settings)
    app.state.permission_evaluator = create_permission_evaluator(store, settings)

    # Last added runs first
    app.add_middleware(TenantContextMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    async def health_check() -> dict[str, object]:
        return await check_health(app.state.settings, app.state.directory_store)

    app.include_router(auth_router)
    app.include_router(context_router)

    logger.info(
        "app_created",
        system_mode=settings.system_mode,
        use_database=settings.use_database,
    )
    return app
