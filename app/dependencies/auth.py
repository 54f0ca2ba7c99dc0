"""
Authentication dependencies for FastAPI route protection.
"""


from fastapi import Depends
from fastapi.security import APIKeyCookie

from app.config import settings
from app.schemas import Identity
from app.services.auth_service import resolve_session

# Session token extraction from the cookie; a missing cookie is handled below
session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)


async def get_current_identity(token: str | None = Depends(session_cookie)) -> Identity:
    """
    Dependency resolving the caller's identity from the session cookie.

    Raises UnauthenticatedError (401) without a cookie and InvalidSessionError
    (403) for a token that does not verify.
    """
    return resolve_session(token)
