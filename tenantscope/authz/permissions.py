"""Capability catalog and wildcard matching."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import StrEnum


class Permission(StrEnum):
    USERS_READ = "users.read"
    USERS_WRITE = "users.write"
    USERS_DELETE = "users.delete"
    TENANTS_READ = "tenants.read"
    TENANTS_WRITE = "tenants.write"
    TENANTS_DELETE = "tenants.delete"
    ROLES_READ = "roles.read"
    ROLES_WRITE = "roles.write"
    ROLES_DELETE = "roles.delete"
    BILLING_READ = "billing.read"
    BILLING_WRITE = "billing.write"
    SETTINGS_READ = "settings.read"
    SETTINGS_WRITE = "settings.write"
    ANALYTICS_READ = "analytics.read"
    ANALYTICS_EXPORT = "analytics.export"
    WHITELABEL_READ = "whitelabel.read"
    WHITELABEL_WRITE = "whitelabel.write"
    INTEGRATIONS_READ = "integrations.read"
    INTEGRATIONS_WRITE = "integrations.write"
    WEBHOOKS_READ = "webhooks.read"
    WEBHOOKS_WRITE = "webhooks.write"
    SUPPORT_READ = "support.read"
    SUPPORT_WRITE = "support.write"
    API_ACCESS = "api.access"
    AUDIT_READ = "audit.read"


# Granted to the platform admin role regardless of what its row stores
ALL_PERMISSIONS: frozenset[str] = frozenset(p.value for p in Permission)

PERMISSION_CATEGORIES: dict[str, tuple[str, ...]] = {
    "ADMIN": ("users.*", "tenants.*", "roles.*"),
    "BILLING": ("billing.*",),
    "ANALYTICS": ("analytics.*",),
    "SETTINGS": ("settings.*", "whitelabel.*"),
    "INTEGRATIONS": ("integrations.*", "webhooks.*", "api.*"),
    "SUPPORT": ("support.*",),
    "AUDIT": ("audit.*",),
}


def matches_permission(permission: str, pattern: str) -> bool:
    """``users.*`` matches ``users.read``; ``*`` matches everything."""
    if pattern in ("*", permission):
        return True
    if "*" not in pattern:
        return False
    regex = "^" + ".*".join(re.escape(part) for part in pattern.split("*")) + "$"
    return re.match(regex, permission) is not None


def expand_permissions(patterns: Iterable[str]) -> frozenset[str]:
    """Turn stored permission entries into a concrete capability set.

    Wildcards expand against the catalog. Literal entries are kept even if
    the catalog does not know them yet.
    """
    expanded: set[str] = set()
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern:
            continue
        if "*" in pattern:
            expanded.update(p for p in ALL_PERMISSIONS if matches_permission(p, pattern))
        else:
            expanded.add(pattern)
    return frozenset(expanded)


def permission_category(permission: str) -> str | None:
    for category, patterns in PERMISSION_CATEGORIES.items():
        if any(matches_permission(permission, pattern) for pattern in patterns):
            return category
    return None


def permissions_in_category(category: str) -> frozenset[str]:
    patterns = PERMISSION_CATEGORIES.get(category.upper(), ())
    return frozenset(
        p for p in ALL_PERMISSIONS if any(matches_permission(p, pattern) for pattern in patterns)
    )
