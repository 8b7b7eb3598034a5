"""Exception hierarchy for tenantscope."""


class TenantScopeError(Exception):
    """Base exception for all tenantscope errors."""


class StoreUnavailableError(TenantScopeError):
    """Raised when the directory store backend cannot be reached."""
