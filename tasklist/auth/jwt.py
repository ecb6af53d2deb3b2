# =============================================================================
# JWT Token Issuing and Verification
# =============================================================================
#
# Tokens are HMAC-signed JWTs (HS256 by default) carrying:
#   sub   - user id
#   email - user email
#   iat   - issued at
#   exp   - expiry (iat + configured lifetime)
#   jti   - random token id, so every login yields a distinct token
#
# Nothing is stored server-side; a token stays valid until it expires.
#
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from pydantic import BaseModel
import jwt

from tasklist.config import JWT_ALGORITHMS, Settings
from tasklist.core.errors import ConfigError, ExpiredTokenError, InvalidTokenError
from tasklist.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================


class TokenPayload(BaseModel):
    """Verified JWT claims."""
    sub: str  # user_id
    email: str
    iat: datetime
    exp: datetime
    jti: str


# =============================================================================
# Issuer
# =============================================================================


class TokenIssuer:
    """
    Signs and verifies identity tokens with a shared secret.

    Usage:
        issuer = TokenIssuer.from_settings(get_settings())
        token = issuer.issue(user.id, user.email)
        payload = issuer.verify(token)  # raises TokenError subclasses
    """

    def __init__(self, secret_key: str, expires_in: timedelta, algorithm: str = "HS256"):
        if not secret_key:
            raise ConfigError("JWT secret key is not configured")
        if expires_in.total_seconds() <= 0:
            raise ConfigError("JWT lifetime must be positive")
        if algorithm not in JWT_ALGORITHMS:
            raise ConfigError(f"Unsupported JWT algorithm: {algorithm}")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.expires_in = expires_in

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(
            secret_key=settings.jwt_secret_key,
            expires_in=settings.jwt_expires_delta,
            algorithm=settings.jwt_algorithm,
        )

    def issue(self, user_id: str, email: str, now: datetime | None = None) -> str:
        """Create a signed token for this identity."""
        issued_at = now or utc_now()
        payload = {
            "sub": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.expires_in,
            "jti": generate_id("tok"),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload:
        """
        Decode and validate a token.

        Raises:
            ExpiredTokenError: Token has expired
            InvalidTokenError: Token is malformed, mis-signed or incomplete
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "email", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredTokenError() from e
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise InvalidTokenError() from e

        try:
            return TokenPayload(
                sub=payload["sub"],
                email=payload["email"],
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                jti=payload.get("jti", ""),
            )
        except (TypeError, ValueError) as e:
            raise InvalidTokenError() from e
