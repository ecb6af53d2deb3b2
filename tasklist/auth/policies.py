"""
Policies - the authorization gate for protected routes.

Usage:
    @router.get("/tasks")
    async def list_tasks(ctx: AuthContext = Depends(require_auth)):
        ...

The gate:
- extracts the bearer token from the Authorization header
- verifies it with the app's TokenIssuer (signature first, then expiry)
- attaches the resolved AuthContext to ``request.state.auth``
- fails closed with 401 on a missing, invalid or expired token
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tasklist.auth.context import AuthContext
from tasklist.auth.jwt import TokenIssuer
from tasklist.core.errors import AuthRequiredError, TokenError

logger = logging.getLogger(__name__)


# Optional bearer (doesn't fail on its own if no token; we raise our own error)
optional_bearer = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    """The TokenIssuer built by the app factory."""
    return request.app.state.token_issuer


async def require_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthContext:
    """Resolve the caller's identity or raise a 401 error."""
    if not credentials or not credentials.credentials:
        raise AuthRequiredError()

    try:
        payload = issuer.verify(credentials.credentials)
    except TokenError as e:
        logger.info(f"Rejected bearer token on {request.method} {request.url.path}: {type(e).__name__}")
        raise

    ctx = AuthContext.from_token(payload)
    request.state.auth = ctx
    return ctx
