# Authentication API routes for signup, login, logout and the current user

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db import get_app_db
from app.dependencies.auth import get_current_identity
from app.schemas import Credentials, Identity, MessageResponse, Session, UserEnvelope
from app.services.auth_service import AuthService, end_session

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


def _set_session_cookie(response: Response, session: Session) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )


@router.post("/signup", response_model=UserEnvelope)
async def signup(
    credentials: Credentials,
    response: Response,
    db: AsyncSession = Depends(get_app_db),
):
    """Create an account and start a session for it."""
    session = await AuthService(db).signup(credentials.username, credentials.password)
    _set_session_cookie(response, session)
    return UserEnvelope(user=session.user)


@router.post("/login", response_model=UserEnvelope)
async def login(
    credentials: Credentials,
    response: Response,
    db: AsyncSession = Depends(get_app_db),
):
    """Check the password and start a fresh session."""
    session = await AuthService(db).login(credentials.username, credentials.password)
    _set_session_cookie(response, session)
    return UserEnvelope(user=session.user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    end_session()
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserEnvelope)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity),
):
    """Return the identity carried by the session cookie."""
    return UserEnvelope(user=identity)
