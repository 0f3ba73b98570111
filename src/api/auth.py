"""Single-admin authentication with HS256 bearer tokens.

``POST /api/login`` exchanges the configured admin credentials for a JWT
carrying a ``username`` claim.  Every other protected route declares
:data:`AuthDep`, which validates the ``Authorization: Bearer <token>``
header and yields the decoded claims.
"""

from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

import jwt
import structlog
from fastapi import Depends, HTTPException, Request

from src.config.settings import Settings
from src.utils.errors import AuthenticationError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_ALGORITHM = "HS256"


class AuthService:
    """Issues and verifies admin tokens."""

    def __init__(self, settings: Settings) -> None:
        self._username = settings.admin_username
        self._password = settings.admin_password
        self._secret = settings.jwt_secret
        self._expiry = timedelta(hours=settings.jwt_expiry_hours)

    def login(self, username: str, password: str) -> str:
        """Return a signed token if *username* / *password* match the admin account.

        Raises
        ------
        AuthenticationError
            If either value does not match.
        """
        # Compare both fields even when the first fails.
        user_ok = hmac.compare_digest(username.encode(), self._username.encode())
        pass_ok = hmac.compare_digest(password.encode(), self._password.encode())
        if not (user_ok and pass_ok):
            _logger.warning("login_rejected", username=username)
            raise AuthenticationError(message="Invalid credentials")

        now = datetime.now(timezone.utc)
        claims = {"username": username, "iat": now, "exp": now + self._expiry}
        _logger.info("login_succeeded", username=username)
        return jwt.encode(claims, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> dict[str, Any]:
        """Return the claims of *token*.

        Raises
        ------
        AuthenticationError
            If the signature is wrong, the token expired or is malformed.
        """
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as exc:
            raise AuthenticationError(message="Invalid token") from exc


def _get_auth_service(request: Request) -> AuthService:
    """Return the auth service from application state."""
    return request.app.state.auth_service


AuthServiceDep = Annotated[AuthService, Depends(_get_auth_service)]


def require_auth(request: Request, auth_service: AuthServiceDep) -> dict[str, Any]:
    """FastAPI dependency rejecting requests without a valid bearer token."""
    header = request.headers.get("Authorization")
    if not header:
        raise HTTPException(status_code=401, detail="Authorization header required")

    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token:
        raise HTTPException(status_code=401, detail="Bearer token required")

    try:
        return auth_service.verify(token)
    except AuthenticationError as exc:
        _logger.info("token_rejected", path=str(request.url.path))
        raise HTTPException(status_code=401, detail=exc.message) from exc


AuthDep = Annotated[dict[str, Any], Depends(require_auth)]
