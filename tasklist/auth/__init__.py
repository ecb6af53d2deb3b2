"""
Authentication and authorization.

- passwords: slow salted hashing and constant-time verification
- jwt: TokenIssuer signs and verifies identity tokens
- policies: require_auth, the gate in front of protected routes
- service: AuthService for register/login/profile
- routes: the /auth router
"""

from tasklist.auth.context import AuthContext
from tasklist.auth.policies import require_auth
from tasklist.auth.jwt import TokenIssuer, TokenPayload
from tasklist.auth.models import (
    AuthResult,
    LoginRequest,
    ProfileUpdate,
    UserCreate,
)
from tasklist.auth.passwords import hash_password, verify_password
from tasklist.auth.service import AuthService
from tasklist.auth.routes import router as auth_router

__all__ = [
    # Gate
    "require_auth",
    "AuthContext",
    # Tokens
    "TokenIssuer",
    "TokenPayload",
    # Service
    "AuthService",
    "AuthResult",
    "LoginRequest",
    "ProfileUpdate",
    "UserCreate",
    "hash_password",
    "verify_password",
    # Router
    "auth_router",
]
