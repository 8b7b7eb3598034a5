"""Session routes.

Sessions are issued by the surrounding platform's sign-in flow with the
shared secret; this service only verifies them and clears the cookie.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request, Response

from tenantscope.web.auth.session import SESSION_COOKIE, SessionAuth, get_session_auth

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/session")
async def read_session(
    request: Request,
    auth: SessionAuth = Depends(get_session_auth),
) -> dict[str, object]:
    """Report whether the request carries a valid session."""
    user_id = auth.user_id_for(request.cookies.get(SESSION_COOKIE))
    return {"authenticated": user_id is not None, "user_id": user_id}


@router.post("/logout")
async def logout(response: Response) -> dict[str, str]:
    """Clear the session cookie on this client."""
    response.delete_cookie(SESSION_COOKIE)
    logger.info("session_cookie_cleared")
    return {"status": "logged_out"}
