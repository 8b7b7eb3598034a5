"""Cookie-based session authentication.

Session cookies carry an HS256 JWT whose ``sub`` is the user id. Tokens are
verified with the shared secret alone, so any process holding the secret
can issue them and every worker accepts them.
"""

from __future__ import annotations

import time
from typing import Any

import jwt
import structlog
from fastapi import Request

logger = structlog.get_logger(__name__)

SESSION_COOKIE = "session"
SESSION_ALGORITHM = "HS256"


class SessionAuth:
    """Issues and verifies signed session tokens."""

    def __init__(self, secret_key: str, max_age: int = 86400) -> None:
        self._secret = secret_key
        self._max_age = max_age

    def create_session(self, user_id: str) -> str:
        """Mint a session token for ``user_id``."""
        now = int(time.time())
        token = jwt.encode(
            {"sub": user_id, "iat": now, "exp": now + self._max_age},
            self._secret,
            algorithm=SESSION_ALGORITHM,
        )
        logger.info("session_created", user_id=user_id)
        return token

    def validate_session(self, token: str | None) -> dict[str, Any] | None:
        """Return the token's claims, or None if it is missing, forged or expired."""
        if not token:
            return None
        try:
            claims: dict[str, Any] = jwt.decode(
                token,
                self._secret,
                algorithms=[SESSION_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.PyJWTError as exc:
            logger.debug("session_rejected", error=str(exc))
            return None
        return claims

    def user_id_for(self, token: str | None) -> str | None:
        claims = self.validate_session(token)
        return str(claims["sub"]) if claims else None


def get_session_auth(request: Request) -> SessionAuth:
    """Return the verifier the app was built with."""
    auth: SessionAuth = request.app.state.session_auth
    return auth
