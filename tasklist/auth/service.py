"""
Auth service - registration, login and profile management.

Orchestrates the user store, password hashing and the token issuer.
Hashing runs in a worker thread so logins never stall the event loop.
Inputs arrive already shape-validated (see tasklist.auth.models);
use ``validate_input`` to build them from raw dicts.
"""

from __future__ import annotations

import asyncio
import logging

from tasklist.auth.jwt import TokenIssuer
from tasklist.auth.models import AuthResult, LoginRequest, ProfileUpdate, UserCreate
from tasklist.auth.passwords import DUMMY_HASH, hash_password, verify_password
from tasklist.core.errors import AuthError, ConflictError, NotFoundError
from tasklist.core.models import User, UserResponse
from tasklist.core.utils import utc_now
from tasklist.storage.base import UserStore

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registers users and exchanges credentials for tokens.

    Usage:
        service = AuthService(storage.users, TokenIssuer.from_settings(settings))
        result = await service.register(UserCreate(...))
        result.token  # bearer token for protected routes
    """

    def __init__(self, users: UserStore, issuer: TokenIssuer):
        self.users = users
        self.issuer = issuer

    def _result(self, user: User, token: str) -> AuthResult:
        return AuthResult(user=UserResponse.from_user(user), token=token)

    async def register(self, data: UserCreate) -> AuthResult:
        """
        Create an account and log it in.

        Raises:
            ConflictError: The email is already registered
        """
        if await self.users.get_by_email(data.email) is not None:
            raise ConflictError()

        now = utc_now()
        user = User(
            email=data.email,
            password_hash=await asyncio.to_thread(hash_password, data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            created_at=now,
            updated_at=now,
        )
        # Signed before the insert so a signing failure leaves no account behind
        token = self.issuer.issue(user.id, user.email)
        # The store enforces uniqueness too, for concurrent registrations
        user = await self.users.create(user)

        logger.info(f"Registered user {user.id}")
        return self._result(user, token)

    async def login(self, data: LoginRequest) -> AuthResult:
        """
        Check credentials and issue a new token.

        Raises:
            AuthError: Unknown email or wrong password (indistinguishable)
        """
        user = await self.users.get_by_email(data.email)

        if user is None:
            await asyncio.to_thread(verify_password, data.password, DUMMY_HASH)
            logger.info("Failed login: unknown email")
            raise AuthError()

        if not await asyncio.to_thread(verify_password, data.password, user.password_hash):
            logger.info(f"Failed login for user {user.id}: wrong password")
            raise AuthError()

        logger.info(f"User {user.id} logged in")
        return self._result(user, self.issuer.issue(user.id, user.email))

    async def get_profile(self, user_id: str) -> UserResponse:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserResponse.from_user(user)

    async def update_profile(self, user_id: str, data: ProfileUpdate) -> UserResponse:
        """Change the supplied name fields only."""
        changes = data.model_dump(exclude_unset=True)
        changes["updated_at"] = utc_now()

        user = await self.users.update(user_id, changes)
        if user is None:
            raise NotFoundError("User not found")

        logger.info(f"Updated profile for user {user_id}: {sorted(changes)}")
        return UserResponse.from_user(user)
