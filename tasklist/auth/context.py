"""
Auth context - who is making the request.

This is the lightweight object the authorization gate hands to route
handlers once a bearer token has been verified.
"""

from __future__ import annotations

from dataclasses import dataclass

from tasklist.auth.jwt import TokenPayload


@dataclass(frozen=True)
class AuthContext:
    """
    Resolved identity for a request.

    Built from the token alone; the user store is not consulted.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth)):
            print(f"User {ctx.user_id} ({ctx.email})")
    """

    user_id: str
    email: str

    @classmethod
    def from_token(cls, payload: TokenPayload) -> AuthContext:
        return cls(user_id=payload.sub, email=payload.email)
