"""Introspection routes for the resolved tenant context and permissions."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query

from tenantscope.authz.evaluator import UserPermissions
from tenantscope.tenancy.context import TenantContext
from tenantscope.web.auth.rbac import get_user_permissions
from tenantscope.web.tenant_context import get_tenant_context

router = APIRouter(prefix="/api", tags=["context"])


def _serialize(permissions: UserPermissions) -> dict[str, Any]:
    return {
        "role": permissions.role,
        "permissions": sorted(permissions.permissions),
        "is_platform_admin": permissions.is_platform_admin,
        "denial": permissions.denial.value if permissions.denial else None,
    }


@router.get("/context")
async def read_context(
    context: TenantContext = Depends(get_tenant_context),
) -> dict[str, str | None]:
    """Return the tenant context resolved for this request."""
    return context.as_dict()


@router.get("/permissions")
async def read_permissions(
    permissions: UserPermissions = Depends(get_user_permissions),
) -> dict[str, Any]:
    """Return the caller's effective permissions in the current tenant scope."""
    return _serialize(permissions)


@router.get("/permissions/check")
async def check_permissions(
    permission: list[str] = Query(...),
    permissions: UserPermissions = Depends(get_user_permissions),
) -> dict[str, Any]:
    """Report which of the requested permissions the caller holds."""
    results = {p: permissions.allows(p) for p in permission}
    return {
        "all": all(results.values()),
        "any": any(results.values()),
        "results": results,
    }
