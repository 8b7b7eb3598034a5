"""SQLModel database table models for the tenant directory."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Return current UTC time as naive datetime for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def _new_uuid() -> str:
    return str(uuid.uuid4())


class Tenant(SQLModel, table=True):
    __tablename__ = "tenants"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    domain: str = Field(unique=True, index=True)
    name: str
    plan: str = Field(default="free")
    status: str = Field(default="active")  # active | suspended | pending
    mode: str | None = Field(default=None)  # multi-tenant | organization-only
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class Workspace(SQLModel, table=True):
    """An organization nested under a tenant."""

    __tablename__ = "workspaces"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    name: str
    created_at: datetime = Field(default_factory=_utc_now)


class Role(SQLModel, table=True):
    __tablename__ = "roles"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: str = ""
    permissions_json: str = Field(default="[]")
    created_at: datetime = Field(default_factory=_utc_now)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    email: str = Field(index=True)
    tenant_id: str | None = Field(default=None, foreign_key="tenants.id", index=True)
    role_id: str | None = Field(default=None, foreign_key="roles.id")
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


class UserTenantRole(SQLModel, table=True):
    __tablename__ = "user_tenant_roles"
    __table_args__ = (UniqueConstraint("user_id", "tenant_id"),)

    id: str = Field(default_factory=_new_uuid, primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    tenant_id: str = Field(foreign_key="tenants.id", index=True)
    role_id: str = Field(foreign_key="roles.id")
    created_at: datetime = Field(default_factory=_utc_now)
