"""Tests for signup, login and session resolution."""

import threading
from datetime import timedelta

import pytest
from jose import jwt
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from app.config import settings
from app.db_handlers import UserDBHandler
from app.errors import (
    ConflictError,
    InvalidInputError,
    InvalidSessionError,
    UnauthenticatedError,
)
from app.models import User
from app.services import auth_service
from app.services.auth_service import AuthService, resolve_session
from app.utils.auth import create_access_token


@pytest.mark.asyncio
async def test_signup_returns_session_for_new_user(db):
    session = await AuthService(db).signup("alice", "pw1")

    assert session.user.username == "alice"
    assert session.token
    assert resolve_session(session.token) == session.user

    user = await db.scalar(select(User).where(User.username == "alice"))
    assert str(user.id) == session.user.id
    assert user.password_hash != "pw1"


@pytest.mark.asyncio
async def test_signup_duplicate_username_conflicts_regardless_of_password(db):
    service = AuthService(db)
    await service.signup("alice", "pw1")

    with pytest.raises(ConflictError):
        await service.signup("alice", "pw1")
    with pytest.raises(ConflictError):
        await service.signup("alice", "something-else")

    count = await db.scalar(select(func.count()).select_from(User))
    assert count == 1


@pytest.mark.asyncio
async def test_signup_race_on_unique_index_is_a_conflict(store, monkeypatch):
    async with store.session() as first:
        await AuthService(first).signup("alice", "pw1")

    async with store.session() as second:
        service = AuthService(second)

        async def no_user(*args, **kwargs):
            return None

        # Pretend the lookup ran before the other signup committed
        monkeypatch.setattr(service.user_db_handler, "get_user_by_username", no_user)
        with pytest.raises(ConflictError) as exc_info:
            await service.signup("alice", "pw2")

    assert isinstance(exc_info.value.__cause__, IntegrityError)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username,password",
    [("", "pw"), ("alice", ""), (None, "pw"), ("alice", None), ("   ", "pw")],
)
async def test_signup_requires_both_fields(db, username, password):
    with pytest.raises(InvalidInputError):
        await AuthService(db).signup(username, password)


@pytest.mark.asyncio
async def test_signup_rejects_password_over_bcrypt_limit(db):
    with pytest.raises(InvalidInputError):
        await AuthService(db).signup("alice", "x" * 73)


@pytest.mark.asyncio
async def test_login_after_signup_references_same_user(db):
    service = AuthService(db)
    signed_up = await service.signup("alice", "pw1")

    logged_in = await service.login("alice", "pw1")

    assert logged_in.user.id == signed_up.user.id
    assert resolve_session(logged_in.token).id == signed_up.user.id


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_user_look_the_same(db):
    service = AuthService(db)
    await service.signup("alice", "pw1")

    with pytest.raises(UnauthenticatedError) as wrong_password:
        await service.login("alice", "nope")
    with pytest.raises(UnauthenticatedError) as unknown_user:
        await service.login("mallory", "pw1")

    assert wrong_password.value.message == unknown_user.value.message


@pytest.mark.asyncio
async def test_login_username_is_case_sensitive(db):
    service = AuthService(db)
    await service.signup("alice", "pw1")

    with pytest.raises(UnauthenticatedError):
        await service.login("Alice", "pw1")


def test_resolve_session_without_token_is_unauthenticated():
    with pytest.raises(UnauthenticatedError):
        resolve_session(None)
    with pytest.raises(UnauthenticatedError):
        resolve_session("")


def test_resolve_session_rejects_garbage():
    with pytest.raises(InvalidSessionError):
        resolve_session("not-a-token")


def test_resolve_session_rejects_token_signed_with_another_key():
    forged = jwt.encode(
        {"id": "00000000-0000-0000-0000-000000000001", "username": "alice"},
        "someone-elses-key",
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidSessionError):
        resolve_session(forged)


def test_resolve_session_rejects_expired_token():
    expired = create_access_token(
        {"id": "00000000-0000-0000-0000-000000000001", "username": "alice"},
        expires_delta=timedelta(seconds=-1),
    )
    with pytest.raises(InvalidSessionError):
        resolve_session(expired)


def test_resolve_session_rejects_token_without_identity_claims():
    token = create_access_token({"sub": "alice"})
    with pytest.raises(InvalidSessionError):
        resolve_session(token)


def test_session_token_is_valid_for_24_hours():
    token = create_access_token(
        {"id": "00000000-0000-0000-0000-000000000001", "username": "alice"}
    )
    claims = jwt.get_unverified_claims(token)

    assert claims["exp"] - claims["iat"] == 24 * 60 * 60


@pytest.mark.asyncio
async def test_username_lookup_is_exact(db):
    await AuthService(db).signup("alice", "pw1")
    handler = UserDBHandler()

    user = await handler.get_user_by_username("alice", db=db)

    assert user is not None
    assert user.username == "alice"
    assert await handler.get_user_by_username("Alice", db=db) is None
    assert await handler.get_user_by_username("alic", db=db) is None


@pytest.mark.asyncio
async def test_bcrypt_runs_off_the_event_loop_thread(db, monkeypatch):
    loop_thread = threading.get_ident()
    seen_threads = []

    real_hash = auth_service.get_password_hash
    real_verify = auth_service.verify_password

    def recording_hash(password):
        seen_threads.append(threading.get_ident())
        return real_hash(password)

    def recording_verify(password, stored_hash):
        seen_threads.append(threading.get_ident())
        return real_verify(password, stored_hash)

    monkeypatch.setattr(auth_service, "get_password_hash", recording_hash)
    monkeypatch.setattr(auth_service, "verify_password", recording_verify)

    service = AuthService(db)
    await service.signup("alice", "pw1")
    await service.login("alice", "pw1")

    assert len(seen_threads) == 2
    assert loop_thread not in seen_threads


@pytest.mark.asyncio
async def test_long_usernames_are_accepted(db):
    username = "agent-" * 60
    service = AuthService(db)

    signed_up = await service.signup(username, "pw1")

    assert (await service.login(username, "pw1")).user.id == signed_up.user.id
