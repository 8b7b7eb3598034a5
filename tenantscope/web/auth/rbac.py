"""Role-based access control dependencies for multi-tenant requests."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog
from fastapi import Depends, HTTPException, Request

from tenantscope.authz.evaluator import PermissionEvaluator, UserPermissions
from tenantscope.tenancy.context import TenantContext
from tenantscope.types import DenialReason
from tenantscope.web.auth.session import SESSION_COOKIE, get_session_auth
from tenantscope.web.dependencies import get_permission_evaluator
from tenantscope.web.tenant_context import get_tenant_context

logger = structlog.get_logger(__name__)


async def get_current_user_id(request: Request) -> str:
    """Return the session user id or reject with 401."""
    user_id: str | None = getattr(request.state, "session_user_id", None)
    if user_id is None:
        user_id = get_session_auth(request).user_id_for(request.cookies.get(SESSION_COOKIE))
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


async def get_user_permissions(
    user_id: str = Depends(get_current_user_id),
    context: TenantContext = Depends(get_tenant_context),
    evaluator: PermissionEvaluator = Depends(get_permission_evaluator),
) -> UserPermissions:
    """Evaluate the current user's permissions in the request's tenant scope."""
    permissions = await evaluator.evaluate(user_id, context.tenant_id)
    if permissions.denial is DenialReason.BACKEND_UNAVAILABLE:
        raise HTTPException(status_code=503, detail="Directory unavailable")
    return permissions


def require_permission(*required: str) -> Callable[..., Awaitable[UserPermissions]]:
    """Dependency factory: the user must hold every listed permission."""

    async def _check(
        permissions: UserPermissions = Depends(get_user_permissions),
    ) -> UserPermissions:
        missing = [p for p in required if not permissions.allows(p)]
        if missing:
            logger.info("permission_denied", missing=missing, role=permissions.role)
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return permissions

    return _check


def require_any_permission(*accepted: str) -> Callable[..., Awaitable[UserPermissions]]:
    """Dependency factory: the user must hold at least one listed permission."""

    async def _check(
        permissions: UserPermissions = Depends(get_user_permissions),
    ) -> UserPermissions:
        if not permissions.is_platform_admin and not any(
            p in permissions.permissions for p in accepted
        ):
            logger.info("permission_denied", accepted=list(accepted), role=permissions.role)
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return permissions

    return _check


async def require_platform_admin(
    permissions: UserPermissions = Depends(get_user_permissions),
) -> UserPermissions:
    """Require the platform admin role."""
    if not permissions.is_platform_admin:
        raise HTTPException(status_code=403, detail="Platform admin access required")
    return permissions
