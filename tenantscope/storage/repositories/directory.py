"""Directory store: read-only access to tenants, organizations, users and roles."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tenantscope.models.database import Role, Tenant, User, UserTenantRole, Workspace
from tenantscope.models.domain import OrganizationRecord, RoleRecord, TenantRecord, UserWithRole
from tenantscope.storage.lookup import Lookup

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine
    from sqlmodel.sql.expression import SelectOfScalar

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@runtime_checkable
class DirectoryStore(Protocol):
    """Point lookups the tenancy and authorization core depends on.

    Implementations never raise for a missing record or an unreachable
    backend; both come back as a ``Lookup`` status.
    """

    async def get_tenant_by_domain(
        self, domain: str, mode: str | None = None
    ) -> Lookup[TenantRecord]: ...

    async def get_tenant_by_id(self, tenant_id: str) -> Lookup[TenantRecord]: ...

    async def get_user_with_role(self, user_id: str) -> Lookup[UserWithRole]: ...

    async def get_tenant_role_override(
        self, user_id: str, tenant_id: str
    ) -> Lookup[RoleRecord]: ...

    async def get_organization_by_id(
        self, organization_id: str, tenant_id: str | None = None
    ) -> Lookup[OrganizationRecord]: ...

    async def ping(self) -> bool:
        """True when the backend answers."""
        ...


def parse_permissions(raw: str | None) -> tuple[str, ...]:
    """Decode a stored permissions column into a tuple of capability strings."""
    if not raw:
        return ()
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("role_permissions_invalid_json", raw=raw[:100])
        return ()
    if not isinstance(decoded, list):
        return ()
    return tuple(str(p) for p in decoded if isinstance(p, str) and p)


def _tenant_record(row: Tenant) -> TenantRecord:
    return TenantRecord(
        id=row.id,
        domain=row.domain,
        name=row.name,
        plan=row.plan,
        status=row.status,
        mode=row.mode,
    )


def _role_record(row: Role) -> RoleRecord:
    return RoleRecord(id=row.id, name=row.name, permissions=parse_permissions(row.permissions_json))


class DatabaseDirectoryStore:
    """PostgreSQL-backed directory store (SQLModel)."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    async def ping(self) -> bool:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("directory_ping_failed", error=str(exc))
            return False
        return True

    async def _first(self, stmt: SelectOfScalar[Any], op: str) -> Lookup[Any]:
        try:
            async with AsyncSession(self._engine) as session:
                result = await session.execute(stmt)
                row = result.scalars().first()
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("directory_read_failed", op=op, error=str(exc))
            return Lookup.unavailable(exc)
        if row is None:
            return Lookup.not_found()
        return Lookup.found(row)

    async def get_tenant_by_domain(
        self, domain: str, mode: str | None = None
    ) -> Lookup[TenantRecord]:
        stmt = select(Tenant).where(col(Tenant.domain) == domain)
        if mode is not None:
            stmt = stmt.where(col(Tenant.mode) == mode)
        found = await self._first(stmt, "get_tenant_by_domain")
        return Lookup.found(_tenant_record(found.value)) if found.is_found else found

    async def get_tenant_by_id(self, tenant_id: str) -> Lookup[TenantRecord]:
        found = await self._first(
            select(Tenant).where(col(Tenant.id) == tenant_id), "get_tenant_by_id"
        )
        return Lookup.found(_tenant_record(found.value)) if found.is_found else found

    async def get_user_with_role(self, user_id: str) -> Lookup[UserWithRole]:
        found = await self._first(select(User).where(col(User.id) == user_id), "get_user")
        if not found.is_found:
            return found
        user: User = found.value

        role: RoleRecord | None = None
        if user.role_id:
            role_lookup = await self._first(
                select(Role).where(col(Role.id) == user.role_id), "get_user_role"
            )
            if role_lookup.is_unavailable:
                return role_lookup
            if role_lookup.is_found:
                role = _role_record(role_lookup.value)

        return Lookup.found(
            UserWithRole(id=user.id, email=user.email, tenant_id=user.tenant_id, role=role)
        )

    async def get_tenant_role_override(
        self, user_id: str, tenant_id: str
    ) -> Lookup[RoleRecord]:
        stmt = (
            select(Role)
            .join(UserTenantRole, col(UserTenantRole.role_id) == col(Role.id))
            .where(
                col(UserTenantRole.user_id) == user_id,
                col(UserTenantRole.tenant_id) == tenant_id,
            )
        )
        found = await self._first(stmt, "get_tenant_role_override")
        return Lookup.found(_role_record(found.value)) if found.is_found else found

    async def get_organization_by_id(
        self, organization_id: str, tenant_id: str | None = None
    ) -> Lookup[OrganizationRecord]:
        stmt = select(Workspace).where(col(Workspace.id) == organization_id)
        if tenant_id is not None:
            stmt = stmt.where(col(Workspace.tenant_id) == tenant_id)
        found = await self._first(stmt, "get_organization_by_id")
        if not found.is_found:
            return found
        row: Workspace = found.value
        return Lookup.found(OrganizationRecord(id=row.id, tenant_id=row.tenant_id, name=row.name))


class InMemoryDirectoryStore:
    """In-memory directory for dev/testing without a database.

    With ``record_reads`` the names of the operations called are appended
    to ``reads``; off by default so a long-running process does not grow.
    """

    def __init__(self, record_reads: bool = False) -> None:
        self._tenants: dict[str, TenantRecord] = {}
        self._organizations: dict[str, OrganizationRecord] = {}
        self._roles: dict[str, RoleRecord] = {}
        self._users: dict[str, dict[str, Any]] = {}
        self._overrides: dict[tuple[str, str], str] = {}
        self._outage: str | None = None
        self._record_reads = record_reads
        self.reads: list[str] = []

    # -- seeding ----------------------------------------------------------

    def add_tenant(self, tenant: TenantRecord) -> TenantRecord:
        self._tenants[tenant.id] = tenant
        return tenant

    def add_organization(self, organization: OrganizationRecord) -> OrganizationRecord:
        self._organizations[organization.id] = organization
        return organization

    def add_role(self, role: RoleRecord) -> RoleRecord:
        self._roles[role.id] = role
        return role

    def add_user(
        self,
        user_id: str,
        email: str,
        tenant_id: str | None = None,
        role_id: str | None = None,
    ) -> None:
        self._users[user_id] = {"email": email, "tenant_id": tenant_id, "role_id": role_id}

    def set_override(self, user_id: str, tenant_id: str, role_id: str) -> None:
        """Assign a tenant-scoped role; replaces any existing row for the pair."""
        self._overrides[(user_id, tenant_id)] = role_id

    def simulate_outage(self, error: str | None = "directory store unreachable") -> None:
        """Make every read report the backend as unavailable (None restores it)."""
        self._outage = error

    # -- reads ------------------------------------------------------------

    def _read(self, op: str) -> str | None:
        if self._record_reads:
            self.reads.append(op)
        return self._outage

    async def ping(self) -> bool:
        return self._outage is None

    async def get_tenant_by_domain(
        self, domain: str, mode: str | None = None
    ) -> Lookup[TenantRecord]:
        if (outage := self._read("get_tenant_by_domain")) is not None:
            return Lookup.unavailable(outage)
        for tenant in self._tenants.values():
            if tenant.domain == domain and (mode is None or tenant.mode == mode):
                return Lookup.found(tenant)
        return Lookup.not_found()

    async def get_tenant_by_id(self, tenant_id: str) -> Lookup[TenantRecord]:
        if (outage := self._read("get_tenant_by_id")) is not None:
            return Lookup.unavailable(outage)
        return _from_optional(self._tenants.get(tenant_id))

    async def get_user_with_role(self, user_id: str) -> Lookup[UserWithRole]:
        if (outage := self._read("get_user_with_role")) is not None:
            return Lookup.unavailable(outage)
        row = self._users.get(user_id)
        if row is None:
            return Lookup.not_found()
        role = self._roles.get(row["role_id"]) if row["role_id"] else None
        return Lookup.found(
            UserWithRole(id=user_id, email=row["email"], tenant_id=row["tenant_id"], role=role)
        )

    async def get_tenant_role_override(
        self, user_id: str, tenant_id: str
    ) -> Lookup[RoleRecord]:
        if (outage := self._read("get_tenant_role_override")) is not None:
            return Lookup.unavailable(outage)
        role_id = self._overrides.get((user_id, tenant_id))
        return _from_optional(self._roles.get(role_id) if role_id else None)

    async def get_organization_by_id(
        self, organization_id: str, tenant_id: str | None = None
    ) -> Lookup[OrganizationRecord]:
        if (outage := self._read("get_organization_by_id")) is not None:
            return Lookup.unavailable(outage)
        organization = self._organizations.get(organization_id)
        if organization is None or (tenant_id is not None and organization.tenant_id != tenant_id):
            return Lookup.not_found()
        return Lookup.found(organization)


def _from_optional(value: T | None) -> Lookup[T]:
    return Lookup.found(value) if value is not None else Lookup.not_found()
