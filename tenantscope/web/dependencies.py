"""Composition root: builds the core from settings and exposes it to routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from fastapi import Request

from tenantscope.authz.evaluator import PermissionEvaluator
from tenantscope.storage.repositories.directory import DirectoryStore, InMemoryDirectoryStore
from tenantscope.tenancy.context import ContextResolver
from tenantscope.tenancy.mode import ModeSelector
from tenantscope.tenancy.resolver import TenantResolver
from tenantscope.web.auth.session import SessionAuth

if TYPE_CHECKING:
    from tenantscope.config.settings import Settings

logger = structlog.get_logger(__name__)


def create_directory_store(settings: Settings) -> DirectoryStore:
    """Create the appropriate directory store based on settings."""
    if settings.use_database:
        from tenantscope.storage.database import create_engine
        from tenantscope.storage.repositories.directory import DatabaseDirectoryStore

        return DatabaseDirectoryStore(create_engine(settings.database_url, echo=settings.debug))
    logger.warning("directory_store_in_memory")
    return InMemoryDirectoryStore()


def create_context_resolver(store: DirectoryStore, settings: Settings) -> ContextResolver:
    resolver = TenantResolver(
        store,
        base_domain=settings.base_domain,
        reserved_subdomains=settings.reserved_subdomains,
    )
    selector = ModeSelector(
        store,
        configured_mode=settings.system_mode,
        platform_tenant_domain=settings.platform_tenant_domain,
    )
    return ContextResolver(resolver, selector)


def create_permission_evaluator(store: DirectoryStore, settings: Settings) -> PermissionEvaluator:
    return PermissionEvaluator(store, admin_role_name=settings.platform_admin_role)


def create_session_auth(settings: Settings) -> SessionAuth:
    return SessionAuth(secret_key=settings.secret_key)


def get_context_resolver(request: Request) -> ContextResolver:
    resolver: ContextResolver = request.app.state.context_resolver
    return resolver


def get_permission_evaluator(request: Request) -> PermissionEvaluator:
    evaluator: PermissionEvaluator = request.app.state.permission_evaluator
    return evaluator
