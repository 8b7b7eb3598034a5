"""Effective permission evaluation for a user, optionally within a tenant.

Order of evaluation:

1. Look up the user and its platform role. A missing user or an
   unreachable store yields an empty, denied result.
2. A platform role named ``Platform Admin`` gets every capability, whatever
   the tenant and whatever the role row stores.
3. With a tenant id, a (user, tenant) override role replaces the platform
   role for this call. Nothing is merged.
4. Otherwise the platform role applies.

Permissions always come from the selected role's stored ``permissions``.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from tenantscope.authz.permissions import ALL_PERMISSIONS, expand_permissions
from tenantscope.constants import PLATFORM_ADMIN_ROLE
from tenantscope.models.domain import RoleRecord
from tenantscope.storage.repositories.directory import DirectoryStore
from tenantscope.types import DenialReason

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class UserPermissions:
    role: str | None
    permissions: frozenset[str]
    is_platform_admin: bool = False
    denial: DenialReason | None = None

    @classmethod
    def denied(cls, reason: DenialReason) -> UserPermissions:
        return cls(role=None, permissions=frozenset(), is_platform_admin=False, denial=reason)

    def allows(self, permission: str) -> bool:
        return self.is_platform_admin or permission in self.permissions


class PermissionEvaluator:
    """Answers permission questions; enforcement is up to the caller."""

    def __init__(self, store: DirectoryStore, admin_role_name: str = PLATFORM_ADMIN_ROLE) -> None:
        self._store = store
        self._admin_role_name = admin_role_name

    async def evaluate(self, user_id: str, tenant_id: str | None = None) -> UserPermissions:
        user_lookup = await self._store.get_user_with_role(user_id)
        if user_lookup.is_unavailable:
            logger.warning("permissions_user_unavailable", user_id=user_id, error=user_lookup.error)
            return UserPermissions.denied(DenialReason.BACKEND_UNAVAILABLE)
        user = user_lookup.value
        if user is None:
            logger.info("permissions_user_not_found", user_id=user_id)
            return UserPermissions.denied(DenialReason.USER_NOT_FOUND)

        platform_role = user.role
        if platform_role is not None and platform_role.name == self._admin_role_name:
            return UserPermissions(
                role=platform_role.name,
                permissions=ALL_PERMISSIONS,
                is_platform_admin=True,
            )

        if tenant_id:
            override = await self._store.get_tenant_role_override(user_id, tenant_id)
            if override.is_unavailable:
                logger.warning(
                    "permissions_override_unavailable",
                    user_id=user_id,
                    tenant_id=tenant_id,
                    error=override.error,
                )
                return UserPermissions.denied(DenialReason.BACKEND_UNAVAILABLE)
            if override.value is not None:
                logger.debug(
                    "permissions_tenant_override",
                    user_id=user_id,
                    tenant_id=tenant_id,
                    role=override.value.name,
                )
                return _from_role(override.value)

        if platform_role is None:
            logger.info("permissions_no_role", user_id=user_id)
            return UserPermissions.denied(DenialReason.NO_ROLE)
        return _from_role(platform_role)

    async def has_permission(
        self, user_id: str, permission: str, tenant_id: str | None = None
    ) -> bool:
        return (await self.evaluate(user_id, tenant_id)).allows(permission)

    async def has_any_permission(
        self, user_id: str, permissions: Iterable[str], tenant_id: str | None = None
    ) -> bool:
        wanted = list(permissions)
        result = await self.evaluate(user_id, tenant_id)
        if result.is_platform_admin:
            return True
        return any(p in result.permissions for p in wanted)

    async def has_all_permissions(
        self, user_id: str, permissions: Iterable[str], tenant_id: str | None = None
    ) -> bool:
        wanted = list(permissions)
        result = await self.evaluate(user_id, tenant_id)
        if result.is_platform_admin:
            return True
        return all(p in result.permissions for p in wanted)


def _from_role(role: RoleRecord) -> UserPermissions:
    return UserPermissions(role=role.name, permissions=expand_permissions(role.permissions))
