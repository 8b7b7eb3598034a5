"""Shared test fixtures.

The seeded directory used across the suite:

tenants        acme (no stored mode), globex (organization-only),
               initech (multi-tenant, suspended), platform (organization-only)
organizations  org-acme-sales, org-globex-ops, org-platform-hq
users          u-root (Platform Admin, no tenant), u-alice (acme, Organization Admin),
               u-bob (acme, Viewer), u-carol (initech, Viewer),
               u-norole (acme, no role), u-dave (globex, Developer)
overrides      (u-bob, t-initech) -> Billing Owner, (u-root, t-acme) -> Viewer
"""

from __future__ import annotations

import json

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession

from tenantscope.config.settings import Settings
from tenantscope.models.database import Role, Tenant, User, UserTenantRole, Workspace
from tenantscope.models.domain import OrganizationRecord, RoleRecord, TenantRecord
from tenantscope.storage.database import init_db
from tenantscope.storage.repositories.directory import InMemoryDirectoryStore
from tenantscope.web.app import create_app

TENANTS = [
    {"id": "t-acme", "domain": "acme", "name": "Acme Corp", "plan": "pro", "mode": None},
    {
        "id": "t-globex",
        "domain": "globex",
        "name": "Globex",
        "plan": "starter",
        "mode": "organization-only",
    },
    {
        "id": "t-initech",
        "domain": "initech",
        "name": "Initech",
        "plan": "free",
        "status": "suspended",
        "mode": "multi-tenant",
    },
    {
        "id": "t-platform",
        "domain": "platform",
        "name": "Platform",
        "plan": "enterprise",
        "mode": "organization-only",
    },
]

ORGANIZATIONS = [
    {"id": "org-acme-sales", "tenant_id": "t-acme", "name": "Sales"},
    {"id": "org-globex-ops", "tenant_id": "t-globex", "name": "Operations"},
    {"id": "org-platform-hq", "tenant_id": "t-platform", "name": "HQ"},
]

ROLES = [
    {"id": "r-admin", "name": "Platform Admin", "permissions": []},
    {
        "id": "r-orgadmin",
        "name": "Organization Admin",
        "permissions": ["users.read", "users.write", "tenants.read", "settings.*"],
    },
    {"id": "r-viewer", "name": "Viewer", "permissions": ["users.read", "analytics.read"]},
    {"id": "r-billing", "name": "Billing Owner", "permissions": ["billing.*", "analytics.read"]},
    {"id": "r-dev", "name": "Developer", "permissions": ["api.access"]},
]

USERS = [
    {"id": "u-root", "email": "root@platform.test", "tenant_id": None, "role_id": "r-admin"},
    {"id": "u-alice", "email": "alice@acme.test", "tenant_id": "t-acme", "role_id": "r-orgadmin"},
    {"id": "u-bob", "email": "bob@acme.test", "tenant_id": "t-acme", "role_id": "r-viewer"},
    {
        "id": "u-carol",
        "email": "carol@initech.test",
        "tenant_id": "t-initech",
        "role_id": "r-viewer",
    },
    {"id": "u-norole", "email": "nobody@acme.test", "tenant_id": "t-acme", "role_id": None},
    {"id": "u-dave", "email": "dave@globex.test", "tenant_id": "t-globex", "role_id": "r-dev"},
]

OVERRIDES = [
    {"user_id": "u-bob", "tenant_id": "t-initech", "role_id": "r-billing"},
    {"user_id": "u-root", "tenant_id": "t-acme", "role_id": "r-viewer"},
]


@pytest.fixture()
def store() -> InMemoryDirectoryStore:
    """In-memory directory seeded with the fixture data above."""
    directory = InMemoryDirectoryStore(record_reads=True)
    for tenant in TENANTS:
        directory.add_tenant(TenantRecord(**tenant))
    for organization in ORGANIZATIONS:
        directory.add_organization(OrganizationRecord(**organization))
    for role in ROLES:
        directory.add_role(
            RoleRecord(id=role["id"], name=role["name"], permissions=tuple(role["permissions"]))
        )
    for user in USERS:
        directory.add_user(user["id"], user["email"], user["tenant_id"], user["role_id"])
    for override in OVERRIDES:
        directory.set_override(override["user_id"], override["tenant_id"], override["role_id"])
    directory.reads.clear()
    return directory


@pytest.fixture()
async def async_engine():
    """In-memory SQLite engine with the directory tables created and seeded."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)

    async with AsyncSession(engine) as session:
        for tenant in TENANTS:
            session.add(Tenant(**tenant))
        for role in ROLES:
            session.add(
                Role(
                    id=role["id"],
                    name=role["name"],
                    permissions_json=json.dumps(role["permissions"]),
                )
            )
        await session.commit()
        for organization in ORGANIZATIONS:
            session.add(Workspace(**organization))
        for user in USERS:
            session.add(User(**user))
        await session.commit()
        for override in OVERRIDES:
            session.add(UserTenantRole(**override))
        await session.commit()

    yield engine
    await engine.dispose()


@pytest.fixture()
def settings() -> Settings:
    return Settings(secret_key="test-secret", use_database=False, base_domain="example.com")


@pytest.fixture()
def app(settings: Settings, store: InMemoryDirectoryStore):
    """A fresh app wired to the seeded in-memory directory."""
    return create_app(settings=settings, store=store)


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://example.com") as client:
        yield client
