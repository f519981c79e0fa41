"""User management schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from .common import RoleChangeType, UserRole
from .organizations import OrganizationResponse


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class ChangeUserRoleRequest(BaseModel):
    """Promote a member to admin or demote an admin to member."""
    type: RoleChangeType
    user_id: str = Field(alias="userId")

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class UserResponse(BaseModel):
    """The user behind the current session."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    user_role: UserRole
    organization_id: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    user_id: str
    email: str
    message: str


class SessionResponse(BaseModel):
    """Current session: the user and, if they belong to one, their organization."""
    user: UserResponse
    organization: Optional[OrganizationResponse] = None
