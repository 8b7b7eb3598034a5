"""Per-request tenant context composition.

``ContextResolver.resolve_context`` runs the tenant resolver, picks the
system mode, resolves the organization scope for that mode and returns one
immutable ``TenantContext``. Each mode is its own type so a context never
carries fields that are meaningless for its topology.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar

import structlog

from tenantscope.constants import ORGANIZATION_ID_HEADER, TENANT_ID_HEADER
from tenantscope.tenancy.mode import ModeSelector
from tenantscope.tenancy.resolver import TenantResolver
from tenantscope.types import EffectiveScope, ResolutionSource, SystemMode

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RequestSignals:
    """Protocol-agnostic description of an inbound request."""

    hostname: str | None = None
    url: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    session_user_id: str | None = None


@dataclass(frozen=True, slots=True)
class MultiTenantContext:
    """Standard tenant -> organization hierarchy."""

    mode: ClassVar[SystemMode] = SystemMode.MULTI_TENANT

    tenant_id: str | None
    organization_id: str | None = None
    source: ResolutionSource = ResolutionSource.NONE

    @property
    def effective_scope(self) -> EffectiveScope:
        return EffectiveScope.TENANT if self.tenant_id else EffectiveScope.ORGANIZATION

    def to_headers(self) -> dict[str, str]:
        return _scope_headers(self.tenant_id, self.organization_id)

    def as_dict(self) -> dict[str, str | None]:
        return _as_dict(self)


@dataclass(frozen=True, slots=True)
class OrganizationOnlyContext:
    """Organizations hang off the resolved tenant or the platform tenant."""

    mode: ClassVar[SystemMode] = SystemMode.ORGANIZATION_ONLY

    tenant_id: str | None
    organization_id: str | None = None
    source: ResolutionSource = ResolutionSource.NONE

    @property
    def effective_scope(self) -> EffectiveScope:
        return EffectiveScope.ORGANIZATION

    def to_headers(self) -> dict[str, str]:
        return _scope_headers(self.tenant_id, self.organization_id)

    def as_dict(self) -> dict[str, str | None]:
        return _as_dict(self)


TenantContext = MultiTenantContext | OrganizationOnlyContext


def _scope_headers(tenant_id: str | None, organization_id: str | None) -> dict[str, str]:
    headers: dict[str, str] = {}
    if tenant_id:
        headers[TENANT_ID_HEADER] = tenant_id
    if organization_id:
        headers[ORGANIZATION_ID_HEADER] = organization_id
    return headers


def _as_dict(context: TenantContext) -> dict[str, str | None]:
    return {
        "tenant_id": context.tenant_id,
        "organization_id": context.organization_id,
        "mode": context.mode.value,
        "effective_scope": context.effective_scope.value,
        "source": context.source.value,
    }


class ContextResolver:
    """Composes tenant resolution, mode selection and organization lookup."""

    def __init__(self, resolver: TenantResolver, selector: ModeSelector) -> None:
        self._resolver = resolver
        self._selector = selector

    async def resolve_context(self, request: RequestSignals) -> TenantContext:
        resolution = await self._resolver.resolve(
            hostname=request.hostname,
            url=request.url,
            headers=request.headers,
            session_user_id=request.session_user_id,
        )
        mode = await self._selector.select_mode(resolution.tenant_id, resolution.tenant)

        context: TenantContext
        if mode is SystemMode.ORGANIZATION_ONLY:
            tenant_id = resolution.tenant_id or await self._selector.platform_tenant_id()
            organization = await self._selector.resolve_organization(request.headers, tenant_id)
            context = OrganizationOnlyContext(
                tenant_id=tenant_id,
                organization_id=organization.id if organization else None,
                source=resolution.source,
            )
        else:
            organization = await self._selector.resolve_organization(
                request.headers, resolution.tenant_id
            )
            context = MultiTenantContext(
                tenant_id=resolution.tenant_id,
                organization_id=organization.id if organization else None,
                source=resolution.source,
            )

        logger.debug(
            "tenant_context_resolved",
            mode=context.mode.value,
            tenant_id=context.tenant_id,
            organization_id=context.organization_id,
            source=context.source.value,
        )
        return context
