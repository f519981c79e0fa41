"""
Organization-related Pydantic schemas shared between server and clients.

Covers: the organization record returned to admins and the member listing
with per-member office attendance.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .common import UserRole


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrganizationResponse(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DeskScheduleResponse(BaseModel):
    """A single office attendance booking."""
    id: str
    user_id: Optional[str] = None
    desk_id: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MemberResponse(BaseModel):
    """An organization member with this year's and last year's bookings."""
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    user_role: UserRole
    organization_id: Optional[str] = None
    created_at: datetime
    desk_schedules_this_year: list[DeskScheduleResponse] = Field(
        default_factory=list, serialization_alias="deskSchedulesThisYear"
    )
    desk_schedules_previous_year: list[DeskScheduleResponse] = Field(
        default_factory=list, serialization_alias="deskSchedulesPreviousYear"
    )

    model_config = {"from_attributes": True}


class MemberListResponse(BaseModel):
    data: list[MemberResponse]
