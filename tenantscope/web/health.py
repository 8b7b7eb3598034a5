"""Health check endpoint logic."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from tenantscope.config.settings import Settings
    from tenantscope.storage.repositories.directory import DirectoryStore

logger = structlog.get_logger(__name__)


async def check_health(settings: Settings, store: DirectoryStore) -> dict[str, object]:
    """Return application health status with a directory store probe."""
    reachable = await store.ping()
    if not reachable:
        logger.warning("health_check_directory_unavailable")
    return {
        "status": "healthy" if reachable else "degraded",
        "version": "0.1.0",
        "system_mode": settings.system_mode or "per-tenant",
        "directory": "database" if settings.use_database else "in-memory",
        "directory_status": "connected" if reachable else "unavailable",
    }
