"""Tenant context dependencies for multi-tenant request scoping."""

from __future__ import annotations

import structlog
from fastapi import Depends, HTTPException, Request

from tenantscope.tenancy.context import ContextResolver, TenantContext
from tenantscope.web.dependencies import get_context_resolver
from tenantscope.web.middleware import request_signals

logger = structlog.get_logger(__name__)


async def get_tenant_context(
    request: Request,
    resolver: ContextResolver = Depends(get_context_resolver),
) -> TenantContext:
    """Return the context resolved by the middleware, resolving it here if absent."""
    context: TenantContext | None = getattr(request.state, "tenant_context", None)
    if context is None:
        context = await resolver.resolve_context(request_signals(request))
        request.state.tenant_context = context
    return context


async def require_tenant(
    context: TenantContext = Depends(get_tenant_context),
) -> TenantContext:
    """Reject requests that did not resolve to a tenant.

    Tenant-scoped data access must never fall back to an unscoped query.
    """
    if context.tenant_id is None:
        logger.info("tenant_required", mode=context.mode.value)
        raise HTTPException(status_code=400, detail="No tenant context for this request")
    return context


async def require_organization(
    context: TenantContext = Depends(require_tenant),
) -> TenantContext:
    """Reject requests without an organization inside the tenant scope."""
    if context.organization_id is None:
        raise HTTPException(status_code=400, detail="No organization context for this request")
    return context
