"""Read-only directory records handed to the core (not persisted directly)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TenantRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    domain: str
    name: str
    plan: str = "free"
    status: str = "active"
    mode: str | None = None


class OrganizationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    tenant_id: str
    name: str


class RoleRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    permissions: tuple[str, ...] = ()  # stored capability strings, may contain wildcards


class UserWithRole(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    tenant_id: str | None = None  # None means a platform-level user
    role: RoleRecord | None = None
