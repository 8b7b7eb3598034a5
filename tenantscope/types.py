"""Enums and type aliases for tenantscope."""

from enum import StrEnum


class SystemMode(StrEnum):
    MULTI_TENANT = "multi-tenant"
    ORGANIZATION_ONLY = "organization-only"


class EffectiveScope(StrEnum):
    TENANT = "tenant"
    ORGANIZATION = "organization"


class ResolutionSource(StrEnum):
    SUBDOMAIN = "subdomain"
    URL_PARAM = "url-param"
    HEADER = "header"
    SESSION = "session"
    NONE = "none"


class LookupStatus(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


class DenialReason(StrEnum):
    USER_NOT_FOUND = "user_not_found"
    NO_ROLE = "no_role"
    BACKEND_UNAVAILABLE = "backend_unavailable"


def parse_mode(value: str | None) -> SystemMode | None:
    """Return the SystemMode for a literal value, or None if it is not one."""
    if not value:
        return None
    try:
        return SystemMode(value)
    except ValueError:
        return None
