"""User model."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from desk_planner_shared.schemas.common import UserRole

from .base import IdMixin, _utcnow


class User(IdMixin, SQLModel, table=True):
    __tablename__ = "users"

    email: Optional[str] = Field(default=None, unique=True, index=True)
    name: Optional[str] = None
    user_role: UserRole = Field(
        default=UserRole.MEMBER,
        sa_type=sa.Enum(UserRole, name="user_role", native_enum=False, length=16),
        nullable=False,
    )
    organization_id: Optional[str] = Field(
        default=None, foreign_key="organizations.id", index=True
    )
    password_hash: Optional[str] = Field(default=None)  # bcrypt hash for email/password login
    created_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
