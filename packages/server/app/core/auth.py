"""
Authentication and Authorization for Desk Planner.

Supports:
- Email/Password login with bcrypt hashes
- JWT session tokens (cookie or Bearer header) with Redis revocation list
- Session resolution to a user, optionally with its organization
- Admin + organization-membership checks for the admin endpoints
"""

from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import SESSION_COOKIE, get_settings
from app.core.database import get_session
from app.core.session_store import is_session_revoked
from app.models.organization import Organization
from app.models.user import User
from desk_planner_shared.schemas.common import UserRole

log = structlog.get_logger()
settings = get_settings()

authorization_header = APIKeyHeader(name="Authorization", auto_error=False)

FORBIDDEN_MESSAGE = "You are not allowed to access this resource"
NO_ORGANIZATION_MESSAGE = "You are not part of an organization"

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

def hash_password(password: str) -> str:
    """Hash a password using bcrypt with cost factor 12."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    return bcrypt.checkpw(password.encode(), hashed.encode())


# ---------------------------------------------------------------------------
# Session tokens (JWT)
# ---------------------------------------------------------------------------

def create_session_token(
    user_id: str,
    *,
    expires_delta: timedelta | None = None,
) -> tuple[str, str]:
    """Create a signed session JWT. Returns (token, jti)."""
    jti = uuid.uuid4().hex
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": exp,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def decode_session_token(token: str) -> dict:
    """Decode and verify a session JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp", "jti"]},
    )


def generate_csrf_token() -> str:
    """Generate a random CSRF token."""
    return secrets.token_urlsafe(32)


# ---------------------------------------------------------------------------
# Session resolution
# ---------------------------------------------------------------------------

class AuthenticatedUser:
    """Container for the session's user and, when requested, their organization."""

    def __init__(self, user: User, organization: Optional[Organization] = None):
        self.user = user
        self.organization = organization
        self.user_id = user.id
        self.role = user.user_role
        self.organization_id = user.organization_id


async def resolve_session_user(
    token: str,
    session: AsyncSession,
    *,
    include_organization: bool = False,
) -> AuthenticatedUser:
    """Map a session token to its user. Raises 401 for any unusable session."""
    try:
        payload = decode_session_token(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    if await is_session_revoked(payload["jti"]):
        raise HTTPException(status_code=401, detail="Session has been revoked")

    user = await session.get(User, payload["sub"])
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    organization = None
    if include_organization and user.organization_id:
        organization = await session.get(Organization, user.organization_id)

    return AuthenticatedUser(user=user, organization=organization)


def session_token_from_request(
    request: Request, authorization: Optional[str]
) -> Optional[str]:
    """Session cookie first (browsers), then a Bearer token (API clients)."""
    token = request.cookies.get(SESSION_COOKIE)
    if token:
        return token
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return None


async def get_authenticated_user(
    request: Request,
    authorization: Optional[str] = Depends(authorization_header),
    session: AsyncSession = Depends(get_session),
) -> AuthenticatedUser:
    """Main authentication dependency."""
    token = session_token_from_request(request, authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")

    auth = await resolve_session_user(token, session)
    request.state.auth = auth
    log.debug("auth.session_resolved", user_id=auth.user_id, role=auth.role)
    return auth


# ---------------------------------------------------------------------------
# Authorization dependencies
# ---------------------------------------------------------------------------

def ensure_org_admin(auth: AuthenticatedUser) -> str:
    """Role check, then membership check. Returns the caller's organization id."""
    if auth.role != UserRole.ADMIN:
        log.info("auth.forbidden", user_id=auth.user_id, role=auth.role)
        raise HTTPException(status_code=403, detail=FORBIDDEN_MESSAGE)
    if not auth.organization_id:
        raise HTTPException(status_code=404, detail=NO_ORGANIZATION_MESSAGE)
    return auth.organization_id


async def require_org_admin(
    auth: AuthenticatedUser = Depends(get_authenticated_user),
) -> AuthenticatedUser:
    """Requires the ADMIN role and membership of an organization."""
    ensure_org_admin(auth)
    return auth
