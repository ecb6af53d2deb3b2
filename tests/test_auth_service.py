"""
Tests for AuthService: registration, login and profiles.
"""

import asyncio

import pytest

from tasklist.auth.models import LoginRequest, ProfileUpdate, UserCreate
from tasklist.auth.passwords import verify_password
from tasklist.core.errors import AuthError, ConflictError, NotFoundError


def _signup(email="a@x.com", password="secret1"):
    return UserCreate(email=email, password=password, first_name="Jo", last_name="Do")


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_user_and_token(self, auth_service, issuer):
        result = await auth_service.register(_signup())

        assert result.user.email == "a@x.com"
        assert result.user.first_name == "Jo"
        assert "password_hash" not in result.user.model_dump()

        payload = issuer.verify(result.token)
        assert payload.sub == result.user.id
        assert payload.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_stored_hash_is_not_plaintext(self, auth_service, storage):
        result = await auth_service.register(_signup(password="secret1"))

        stored = await storage.users.get_by_id(result.user.id)
        assert stored.password_hash != "secret1"
        assert verify_password("secret1", stored.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email_conflicts(self, auth_service):
        await auth_service.register(_signup())

        with pytest.raises(ConflictError) as exc_info:
            await auth_service.register(_signup(password="another1"))
        assert exc_info.value.message == "User already exists"

    @pytest.mark.asyncio
    async def test_store_enforces_uniqueness(self, storage, auth_service):
        result = await auth_service.register(_signup())
        stored = await storage.users.get_by_id(result.user.id)

        with pytest.raises(ConflictError):
            await storage.users.create(stored.model_copy(update={"id": "user_other"}))

    @pytest.mark.asyncio
    async def test_signing_failure_leaves_no_account(self, auth_service, storage, monkeypatch):
        def broken_issue(user_id, email, now=None):
            raise RuntimeError("signing failed")

        monkeypatch.setattr(auth_service.issuer, "issue", broken_issue)

        with pytest.raises(RuntimeError):
            await auth_service.register(_signup())

        # A retry is not blocked by a half-created account
        assert await storage.users.get_by_email("a@x.com") is None


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_issues_fresh_token(self, auth_service):
        registered = await auth_service.register(_signup())

        first = await auth_service.login(LoginRequest(email="a@x.com", password="secret1"))
        second = await auth_service.login(LoginRequest(email="a@x.com", password="secret1"))

        assert first.user.id == registered.user.id
        assert first.token != registered.token
        assert first.token != second.token

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_look_the_same(self, auth_service):
        await auth_service.register(_signup())

        with pytest.raises(AuthError) as unknown:
            await auth_service.login(LoginRequest(email="nobody@x.com", password="secret1"))
        with pytest.raises(AuthError) as wrong:
            await auth_service.login(LoginRequest(email="a@x.com", password="wrong-password"))

        assert unknown.value.message == wrong.value.message == "Invalid credentials"
        assert unknown.value.status_code == wrong.value.status_code == 401

    @pytest.mark.asyncio
    async def test_concurrent_logins_keep_the_event_loop_responsive(self, auth_service):
        await auth_service.register(_signup())
        interval = 0.005
        lags = []
        done = asyncio.Event()

        async def ticker():
            loop = asyncio.get_running_loop()
            while not done.is_set():
                started = loop.time()
                await asyncio.sleep(interval)
                lags.append(loop.time() - started - interval)

        ticking = asyncio.create_task(ticker())
        try:
            await asyncio.gather(
                *(
                    auth_service.login(LoginRequest(email="a@x.com", password="secret1"))
                    for _ in range(4)
                )
            )
        finally:
            done.set()
            await ticking

        assert lags
        assert max(lags) < 0.05


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_profile(self, auth_service):
        result = await auth_service.register(_signup())

        profile = await auth_service.get_profile(result.user.id)
        assert profile.email == "a@x.com"
        assert profile.last_name == "Do"

    @pytest.mark.asyncio
    async def test_get_profile_for_missing_user(self, auth_service):
        with pytest.raises(NotFoundError):
            await auth_service.get_profile("user_gone")

    @pytest.mark.asyncio
    async def test_partial_update_leaves_other_fields(self, auth_service):
        result = await auth_service.register(_signup())

        updated = await auth_service.update_profile(result.user.id, ProfileUpdate(first_name="Joanna"))

        assert updated.first_name == "Joanna"
        assert updated.last_name == "Do"
        assert updated.email == "a@x.com"
        assert updated.updated_at >= result.user.updated_at

    @pytest.mark.asyncio
    async def test_update_missing_user(self, auth_service):
        with pytest.raises(NotFoundError):
            await auth_service.update_profile("user_gone", ProfileUpdate(first_name="Joanna"))
