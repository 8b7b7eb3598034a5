"""Pure extractors that pull a tenant or organization candidate out of a request.

None of these touch the directory store; a returned value is only a
candidate until the resolver looks it up.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable, Mapping
from urllib.parse import parse_qs, urlsplit

from tenantscope.constants import (
    ORGANIZATION_ID_HEADER,
    RESERVED_SUBDOMAINS,
    TENANT_ID_HEADER,
    TENANT_ID_QUERY_PARAM,
)


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def from_hostname(
    host: str | None,
    base_domain: str | None = None,
    reserved: Iterable[str] = RESERVED_SUBDOMAINS,
) -> str | None:
    """Return the tenant subdomain of ``host``, e.g. ``acme.example.com`` -> ``acme``.

    With a ``base_domain`` the host must be a strict subdomain of it. Without
    one, any host of three or more labels yields its leftmost label.
    Localhost, IP literals and reserved labels never match.
    """
    if not host:
        return None
    host = host.strip().lower().rstrip(".")
    if host.startswith("["):  # bracketed IPv6, possibly with a port
        return None
    host = host.split(":", 1)[0]
    if not host or host == "localhost" or _is_ip_literal(host):
        return None

    if base_domain:
        base = base_domain.strip().lower().strip(".")
        if not host.endswith(f".{base}"):
            return None
        remainder = host[: -len(base) - 1]
    else:
        parts = host.split(".")
        if len(parts) < 3:
            return None
        remainder = parts[0]

    label = remainder.split(".")[0]
    if not label or label in {r.lower() for r in reserved}:
        return None
    return label


def from_url(url: str | None) -> str | None:
    """Return the tenant id carried in the ``tenant_id`` query parameter."""
    if not url:
        return None
    values = parse_qs(urlsplit(url).query).get(TENANT_ID_QUERY_PARAM)
    if not values:
        return None
    candidate = values[0].strip()
    return candidate or None


def header_value(headers: Mapping[str, str] | None, name: str) -> str | None:
    """Case-insensitive header read over any mapping, blank values count as absent."""
    if not headers:
        return None
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break
    if value is None:
        return None
    value = value.strip()
    return value or None


def from_headers(headers: Mapping[str, str] | None) -> str | None:
    """Return the tenant id carried in the ``x-tenant-id`` header."""
    return header_value(headers, TENANT_ID_HEADER)


def organization_from_headers(headers: Mapping[str, str] | None) -> str | None:
    """Return the organization id carried in the ``x-organization-id`` header."""
    return header_value(headers, ORGANIZATION_ID_HEADER)
