"""Reserved signal carriers and distinguished values."""

TENANT_ID_QUERY_PARAM = "tenant_id"
TENANT_ID_HEADER = "x-tenant-id"
ORGANIZATION_ID_HEADER = "x-organization-id"

# Leftmost host labels that never name a tenant
RESERVED_SUBDOMAINS = frozenset({"www", "admin", "app", "api", "mail"})

PLATFORM_TENANT_DOMAIN = "platform"
PLATFORM_ADMIN_ROLE = "Platform Admin"
