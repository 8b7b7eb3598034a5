"""Tenant resolution over request signals.

Precedence is strict and first-match-wins:

1. subdomain (looked up by tenant domain)
2. ``tenant_id`` query parameter (looked up by id)
3. ``x-tenant-id`` header (looked up by id)
4. the authenticated session user's stored tenant
5. none

A signal that is absent, names an unknown tenant, or hits an unreachable
store falls through to the next level. Outages are remembered in
``TenantResolution.degraded`` so a ``none`` result caused by the backend is
not mistaken for a genuinely unscoped request.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TypeVar

import structlog

from tenantscope.constants import RESERVED_SUBDOMAINS
from tenantscope.models.domain import TenantRecord
from tenantscope.storage.lookup import Lookup
from tenantscope.storage.repositories.directory import DirectoryStore
from tenantscope.tenancy import signals
from tenantscope.types import ResolutionSource

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class TenantResolution:
    tenant: TenantRecord | None
    tenant_id: str | None
    source: ResolutionSource
    degraded: tuple[ResolutionSource, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.tenant is not None


class TenantResolver:
    """Applies the signal precedence policy against a directory store."""

    def __init__(
        self,
        store: DirectoryStore,
        base_domain: str | None = None,
        reserved_subdomains: Iterable[str] = RESERVED_SUBDOMAINS,
    ) -> None:
        self._store = store
        self._base_domain = base_domain
        self._reserved = frozenset(r.lower() for r in reserved_subdomains)

    async def resolve(
        self,
        hostname: str | None = None,
        url: str | None = None,
        headers: Mapping[str, str] | None = None,
        session_user_id: str | None = None,
    ) -> TenantResolution:
        degraded: list[ResolutionSource] = []

        if hostname:
            candidate = signals.from_hostname(hostname, self._base_domain, self._reserved)
            if candidate:
                lookup = await self._store.get_tenant_by_domain(candidate)
                tenant = _take(lookup, ResolutionSource.SUBDOMAIN, degraded)
                if tenant is not None:
                    return _resolved(tenant, ResolutionSource.SUBDOMAIN, degraded)

        if url:
            candidate = signals.from_url(url)
            if candidate:
                lookup = await self._store.get_tenant_by_id(candidate)
                tenant = _take(lookup, ResolutionSource.URL_PARAM, degraded)
                if tenant is not None:
                    return _resolved(tenant, ResolutionSource.URL_PARAM, degraded)

        if headers:
            candidate = signals.from_headers(headers)
            if candidate:
                lookup = await self._store.get_tenant_by_id(candidate)
                tenant = _take(lookup, ResolutionSource.HEADER, degraded)
                if tenant is not None:
                    return _resolved(tenant, ResolutionSource.HEADER, degraded)

        if session_user_id:
            tenant = await self._from_session(session_user_id, degraded)
            if tenant is not None:
                return _resolved(tenant, ResolutionSource.SESSION, degraded)

        logger.debug("tenant_unresolved", degraded=[d.value for d in degraded])
        return TenantResolution(
            tenant=None,
            tenant_id=None,
            source=ResolutionSource.NONE,
            degraded=tuple(degraded),
        )

    async def _from_session(
        self, user_id: str, degraded: list[ResolutionSource]
    ) -> TenantRecord | None:
        user_lookup = await self._store.get_user_with_role(user_id)
        user = _take(user_lookup, ResolutionSource.SESSION, degraded)
        if user is None or not user.tenant_id:
            return None
        lookup = await self._store.get_tenant_by_id(user.tenant_id)
        return _take(lookup, ResolutionSource.SESSION, degraded)


def _take(
    lookup: Lookup[T], source: ResolutionSource, degraded: list[ResolutionSource]
) -> T | None:
    """Return the found record, noting the source as degraded on an outage."""
    if lookup.is_unavailable:
        logger.warning("tenant_lookup_unavailable", source=source.value, error=lookup.error)
        if source not in degraded:
            degraded.append(source)
        return None
    return lookup.value if lookup.is_found else None


def _resolved(
    tenant: TenantRecord, source: ResolutionSource, degraded: list[ResolutionSource]
) -> TenantResolution:
    logger.debug("tenant_resolved", tenant_id=tenant.id, source=source.value)
    return TenantResolution(
        tenant=tenant,
        tenant_id=tenant.id,
        source=source,
        degraded=tuple(degraded),
    )
