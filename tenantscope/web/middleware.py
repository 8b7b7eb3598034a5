"""FastAPI middleware: request ID injection and tenant context resolution."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from tenantscope.config.logging import bind_tenant_context
from tenantscope.tenancy.context import RequestSignals
from tenantscope.web.auth.session import SESSION_COOKIE, get_session_auth

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

    from tenantscope.tenancy.context import ContextResolver

logger = structlog.get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Adds a unique X-Request-ID header to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        structlog.contextvars.clear_contextvars()
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response


def request_signals(request: Request) -> RequestSignals:
    """Build the protocol-agnostic signal bundle for a Starlette request."""
    token = request.cookies.get(SESSION_COOKIE)
    return RequestSignals(
        hostname=request.headers.get("host") or request.url.hostname,
        url=str(request.url),
        headers=dict(request.headers),
        session_user_id=get_session_auth(request).user_id_for(token),
    )


class TenantContextMiddleware(BaseHTTPMiddleware):
    """Resolves the tenant context once per request.

    The context lands on ``request.state.tenant_context`` and the resolved
    ids are echoed back as ``x-tenant-id`` / ``x-organization-id``.
    Only paths under ``prefix`` are resolved.
    """

    def __init__(self, app: object, prefix: str = "/api/") -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._prefix = prefix

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self._prefix):
            return await call_next(request)

        resolver: ContextResolver = request.app.state.context_resolver
        signals = request_signals(request)
        context = await resolver.resolve_context(signals)

        request.state.tenant_context = context
        request.state.session_user_id = signals.session_user_id
        bind_tenant_context(context.tenant_id, context.organization_id)

        response = await call_next(request)
        for name, value in context.to_headers().items():
            response.headers[name] = value
        return response
