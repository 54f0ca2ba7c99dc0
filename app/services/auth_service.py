"""
Credential and session management: signup, login and session resolution.

Sessions are stateless. A session is a signed token carrying ``{id, username}``
that the HTTP layer stores in a cookie; resolving it never touches the
database, and ending it only means the client drops the cookie.
"""

from __future__ import annotations

import asyncio

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db_handlers import UserDBHandler, transactional
from app.errors import (
    ConflictError,
    InvalidInputError,
    InvalidSessionError,
    UnauthenticatedError,
)
from app.models import User
from app.schemas import Identity, Session
from app.utils.auth import (
    create_access_token,
    decode_access_token,
    dummy_password_hash,
    get_password_hash,
    password_too_long,
    verify_password,
)
from app.utils.logger import setup_logger

logger = setup_logger("auth_service")


def issue_session(user: User) -> Session:
    identity = Identity(id=str(user.id), username=user.username)
    token = create_access_token(
        data={"sub": identity.id, "id": identity.id, "username": identity.username}
    )
    return Session(token=token, user=identity)


def resolve_session(token: str | None) -> Identity:
    """Turn a session token into the identity it was issued for."""
    if not token:
        raise UnauthenticatedError("Unauthorized")

    payload = decode_access_token(token)
    if payload is None:
        raise InvalidSessionError("Forbidden")

    user_id = payload.get("id")
    username = payload.get("username")
    if not isinstance(user_id, str) or not isinstance(username, str):
        logger.warning("Rejected a signed token without id/username claims.")
        raise InvalidSessionError("Forbidden")

    return Identity(id=user_id, username=username)


def end_session() -> None:
    """
    Nothing to revoke server-side: tokens are self-contained and expire on
    their own, so dropping the client cookie ends the session.
    """
    return None


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_db_handler = UserDBHandler()

    @transactional
    async def signup(self, username: str | None, password: str | None) -> Session:
        if not username or not password or not username.strip() or not password.strip():
            raise InvalidInputError("Username and password required")
        if password_too_long(password):
            raise InvalidInputError("Password must be at most 72 bytes")

        existing_user = await self.user_db_handler.get_user_by_username(
            username, db=self.db
        )
        if existing_user:
            raise ConflictError("Username already exists")

        # bcrypt is CPU-bound; keep it off the event loop
        password_hash = await asyncio.to_thread(get_password_hash, password)
        try:
            user = await self.user_db_handler.create(
                {"username": username, "password_hash": password_hash},
                db=self.db,
            )
        except IntegrityError as e:
            # Lost a race with a concurrent signup for the same name
            raise ConflictError("Username already exists") from e

        logger.info(f"Registered user '{username}' (ID: {user.id})")
        return issue_session(user)

    async def login(self, username: str | None, password: str | None) -> Session:
        user = None
        if username:
            user = await self.user_db_handler.get_user_by_username(username, db=self.db)

        # Run the same bcrypt comparison whether or not the user exists
        if user is not None:
            stored_hash = user.password_hash
        else:
            stored_hash = await asyncio.to_thread(dummy_password_hash)
        password_ok = await asyncio.to_thread(
            verify_password, password or "", stored_hash
        )

        if user is None or not password_ok:
            logger.info(f"Failed login attempt for username '{username}'")
            raise UnauthenticatedError("Invalid credentials")

        logger.info(f"User '{user.username}' logged in (ID: {user.id})")
        return issue_session(user)
