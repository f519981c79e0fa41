"""
Authentication endpoints.

- Email/Password login issuing a JWT session cookie
- Logout (session revocation)
- Current session user
"""

from __future__ import annotations

import jwt
import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import (
    authorization_header,
    create_session_token,
    decode_session_token,
    generate_csrf_token,
    resolve_session_user,
    session_token_from_request,
    verify_password,
)
from app.core.config import CSRF_COOKIE, SESSION_COOKIE, get_settings
from app.core.database import get_session
from app.core.session_store import revoke_session
from app.models.user import User
from desk_planner_shared.schemas.organizations import OrganizationResponse
from desk_planner_shared.schemas.users import (
    AuthResponse,
    LoginRequest,
    SessionResponse,
    UserResponse,
)

log = structlog.get_logger()
settings = get_settings()
router = APIRouter()

# Cookie config
COOKIE_KWARGS = {
    "httponly": True,
    "secure": not settings.debug,  # allow non-HTTPS in dev
    "samesite": "lax",
    "path": "/",
    "max_age": settings.jwt_expire_minutes * 60,
}


def _set_session_cookies(response: Response, token: str, csrf: str) -> None:
    """Set the session JWT and CSRF cookies on a response."""
    response.set_cookie(key=SESSION_COOKIE, value=token, **COOKIE_KWARGS)
    response.set_cookie(
        key=CSRF_COOKIE,
        value=csrf,
        httponly=False,  # JS must read this
        secure=not settings.debug,
        samesite="lax",
        path="/",
        max_age=settings.jwt_expire_minutes * 60,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
):
    """Authenticate with email/password and receive a JWT session."""
    result = await session.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if not user or not user.password_hash:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not verify_password(body.password, user.password_hash):
        log.warning("auth.login_failure", email=body.email, reason="bad_password")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token, _jti = create_session_token(user.id)
    _set_session_cookies(response, token, generate_csrf_token())

    log.info("auth.login_success", user_id=user.id, email=body.email)
    return AuthResponse(user_id=user.id, email=body.email, message="Login successful")


@router.get("/me", response_model=SessionResponse)
async def me(
    request: Request,
    authorization: str | None = Depends(authorization_header),
    session: AsyncSession = Depends(get_session),
):
    """The session's user together with their organization."""
    token = session_token_from_request(request, authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")

    auth = await resolve_session_user(token, session, include_organization=True)
    return SessionResponse(
        user=UserResponse.model_validate(auth.user),
        organization=(
            OrganizationResponse.model_validate(auth.organization)
            if auth.organization
            else None
        ),
    )


@router.post("/logout")
async def logout(request: Request, response: Response):
    """Invalidate the current session."""
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        try:
            payload = decode_session_token(token)
        except jwt.PyJWTError:
            payload = None  # Token already invalid, just clear cookies
        if payload:
            await revoke_session(payload["jti"])
            log.info("auth.logout", user_id=payload["sub"])

    response.delete_cookie(SESSION_COOKIE, path="/")
    response.delete_cookie(CSRF_COOKIE, path="/")
    return {"message": "Logged out"}
