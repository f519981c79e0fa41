"""Desk schedule model: one row per office attendance booking."""

from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import IdMixin, _utcnow


class DeskSchedule(IdMixin, SQLModel, table=True):
    __tablename__ = "desk_schedules"

    user_id: Optional[str] = Field(default=None, foreign_key="users.id", index=True)
    desk_id: Optional[str] = None
    start_time: datetime = Field(nullable=False, index=True, sa_type=sa.DateTime(timezone=True))
    end_time: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    created_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )
