from __future__ import annotations

import jwt
import pytest

from labreserve.core.exceptions import AuthenticationError, ValidationError
from labreserve.services.auth import AuthService
from tests.fakes import FakeUserRepository, InMemoryStore


@pytest.fixture
def auth(store: InMemoryStore) -> AuthService:
    return AuthService(store.unit_of_work, secret="s3cret", expires_minutes=5)


@pytest.mark.asyncio
async def test_login_existing_user_with_correct_password(auth: AuthService):
    result = await auth.login("alice", "password")
    assert result.user.username == "alice"
    assert auth.decode_token(result.token) == result.user.id


@pytest.mark.asyncio
async def test_login_wrong_password_is_rejected(auth: AuthService):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        await auth.login("alice", "nope")


@pytest.mark.asyncio
async def test_login_registers_unknown_username(auth: AuthService, store: InMemoryStore):
    result = await auth.login("carol", "pw")
    assert result.user.id == 3
    assert store.users[3].username == "carol"
    assert store.users[3].password_hash != "pw"

    # second login goes through the password check
    again = await auth.login("carol", "pw")
    assert again.user.id == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("username,password", [("", "pw"), ("alice", ""), (None, None)])
async def test_login_requires_both_fields(auth: AuthService, username, password):
    with pytest.raises(ValidationError):
        await auth.login(username, password)


def test_decode_rejects_foreign_and_malformed_tokens(auth: AuthService):
    foreign = jwt.encode({"sub": "1"}, "other-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        auth.decode_token(foreign)
    with pytest.raises(AuthenticationError):
        auth.decode_token("not-a-jwt")

    no_subject = jwt.encode({"foo": "bar"}, "s3cret", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        auth.decode_token(no_subject)


def test_expired_token_is_rejected(store: InMemoryStore):
    expired = AuthService(store.unit_of_work, secret="s3cret", expires_minutes=-1)
    token = expired.issue_token(1)
    with pytest.raises(AuthenticationError):
        expired.decode_token(token)


@pytest.mark.asyncio
async def test_current_user_resolves_subject(auth: AuthService):
    user = await auth.current_user(auth.issue_token(2))
    assert user.username == "bob"

    with pytest.raises(AuthenticationError, match="User not found"):
        await auth.current_user(auth.issue_token(404))


@pytest.fixture
def stale_username_lookup(monkeypatch):
    """First lookup misses, as when another login registers the name in between."""
    original = FakeUserRepository.get_by_username
    calls = {"n": 0}

    async def _lookup(self, username):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return await original(self, username)

    monkeypatch.setattr(FakeUserRepository, "get_by_username", _lookup)
    return calls


@pytest.mark.asyncio
async def test_login_losing_registration_race_signs_in_existing_user(
    auth: AuthService, store: InMemoryStore, stale_username_lookup
):
    winner = store.add_user("carol", "pw")

    result = await auth.login("carol", "pw")

    assert result.user.id == winner.id
    assert [u.username for u in store.users.values()].count("carol") == 1
    assert stale_username_lookup["n"] == 2


@pytest.mark.asyncio
async def test_login_losing_registration_race_still_checks_password(
    auth: AuthService, store: InMemoryStore, stale_username_lookup
):
    store.add_user("carol", "pw")

    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        await auth.login("carol", "other")
