"""System topology selection and organization lookup."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from tenantscope.constants import PLATFORM_TENANT_DOMAIN
from tenantscope.models.domain import OrganizationRecord, TenantRecord
from tenantscope.storage.repositories.directory import DirectoryStore
from tenantscope.tenancy.signals import organization_from_headers
from tenantscope.types import SystemMode, parse_mode

logger = structlog.get_logger(__name__)


class ModeSelector:
    """Decides which topology is active and resolves the organization scope.

    ``configured_mode`` is the process-wide override. It is injected here
    rather than read from the environment so the selector stays a function
    of its inputs.
    """

    def __init__(
        self,
        store: DirectoryStore,
        configured_mode: str | SystemMode | None = None,
        platform_tenant_domain: str = PLATFORM_TENANT_DOMAIN,
    ) -> None:
        self._store = store
        self._configured = parse_mode(configured_mode)
        if configured_mode and self._configured is None:
            logger.warning("system_mode_ignored", value=str(configured_mode))
        self._platform_domain = platform_tenant_domain

    async def select_mode(
        self,
        tenant_id: str | None = None,
        tenant: TenantRecord | None = None,
    ) -> SystemMode:
        """Configured mode, else the tenant's stored mode, else multi-tenant.

        A ``tenant`` record already in hand is used as is; the store is read
        only when just an id is known.
        """
        if self._configured is not None:
            return self._configured

        if tenant is not None:
            return parse_mode(tenant.mode) or SystemMode.MULTI_TENANT

        if tenant_id:
            lookup = await self._store.get_tenant_by_id(tenant_id)
            if lookup.is_unavailable:
                logger.warning("tenant_mode_unavailable", tenant_id=tenant_id, error=lookup.error)
            elif lookup.value is not None:
                stored = parse_mode(lookup.value.mode)
                if stored is not None:
                    return stored

        return SystemMode.MULTI_TENANT

    async def platform_tenant_id(self) -> str | None:
        """Id of the distinguished platform tenant used in organization-only mode."""
        lookup = await self._store.get_tenant_by_domain(
            self._platform_domain, mode=SystemMode.ORGANIZATION_ONLY.value
        )
        if lookup.is_unavailable:
            logger.warning("platform_tenant_unavailable", error=lookup.error)
            return None
        if lookup.value is None:
            logger.warning("platform_tenant_missing", domain=self._platform_domain)
            return None
        return lookup.value.id

    async def resolve_organization(
        self,
        headers: Mapping[str, str] | None,
        scope_tenant_id: str | None,
    ) -> OrganizationRecord | None:
        organization_id = organization_from_headers(headers)
        if organization_id is None:
            return None

        lookup = await self._store.get_organization_by_id(organization_id, scope_tenant_id)
        if lookup.is_unavailable:
            logger.warning(
                "organization_lookup_unavailable",
                organization_id=organization_id,
                error=lookup.error,
            )
            return None
        if lookup.value is None:
            logger.info(
                "organization_not_in_scope",
                organization_id=organization_id,
                tenant_id=scope_tenant_id,
            )
        return lookup.value
