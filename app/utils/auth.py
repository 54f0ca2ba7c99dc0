"""
Authentication utilities with JWT session tokens and bcrypt password hashing.

- bcrypt with a per-password salt, cost factor from BCRYPT_ROUNDS
- HS256 JWT carrying the user's id and username
- Fixed validity window (SESSION_EXPIRE_HOURS, 24 hours by default)
- UTC timezone consistency
"""

from datetime import UTC, datetime, timedelta
from functools import lru_cache

import bcrypt
from jose import JWTError, jwt

from app.config import settings

# bcrypt ignores (or, in recent releases, rejects) anything past this length
BCRYPT_MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES


def get_password_hash(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    hashed_password = bcrypt.hashpw(password=pwd_bytes, salt=salt)
    return hashed_password.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    if password_too_long(plain_password):
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """Hash compared against when the username does not exist."""
    return get_password_hash("shadow-ledger-no-such-user")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a signed session token with the given claims."""
    to_encode = data.copy()
    issued_at = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(hours=settings.session_expire_hours)

    to_encode.update({"iat": issued_at, "exp": issued_at + expires_delta})
    return jwt.encode(to_encode, settings.signing_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and verify a session token. Returns None if it is not valid."""
    try:
        return jwt.decode(
            token, settings.signing_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None
