"""
Organization service — the caller's organization, its members with their
office attendance, and member role changes.

Every function expects the caller to have passed the admin and
organization-membership checks (``app.core.auth.ensure_org_admin``).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

import structlog
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from app.models.desk_schedule import DeskSchedule
from app.models.organization import Organization
from app.models.user import User
from desk_planner_shared.schemas.common import ROLE_CHANGE_TARGETS, RoleChangeType
from desk_planner_shared.schemas.organizations import (
    DeskScheduleResponse,
    MemberResponse,
)

log = structlog.get_logger()


def year_start(year: int, tz: str = "UTC") -> datetime:
    """Jan 1 00:00 of ``year`` in ``tz``, expressed in UTC."""
    return datetime(year, 1, 1, tzinfo=ZoneInfo(tz)).astimezone(timezone.utc)


def attendance_windows(
    now: Optional[datetime] = None, tz: str = "UTC"
) -> tuple[datetime, datetime]:
    """Return (start of previous year, start of current year)."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    current_year = now.astimezone(ZoneInfo(tz)).year
    return year_start(current_year - 1, tz), year_start(current_year, tz)


def group_by_user(
    schedules: Iterable[DeskSchedule],
) -> dict[str, list[DeskSchedule]]:
    """Group schedules by user id, keeping storage order. Unowned rows are skipped."""
    grouped: dict[str, list[DeskSchedule]] = {}
    for schedule in schedules:
        if schedule is None or not schedule.user_id:
            continue
        grouped.setdefault(schedule.user_id, []).append(schedule)
    return grouped


async def get_organization(
    org_id: str, session: AsyncSession
) -> Optional[Organization]:
    """First organization with this id, or None when it no longer exists."""
    result = await session.execute(
        select(Organization).where(Organization.id == org_id)
    )
    return result.scalars().first()


async def list_members(org_id: str, session: AsyncSession) -> list[User]:
    result = await session.execute(select(User).where(User.organization_id == org_id))
    return list(result.scalars().all())


async def list_desk_schedules(
    user_ids: list[str],
    session: AsyncSession,
    *,
    start: datetime,
    end: Optional[datetime] = None,
) -> list[DeskSchedule]:
    """Schedules of the given users starting at or after ``start`` (and before ``end``)."""
    query = select(DeskSchedule).where(
        col(DeskSchedule.user_id).in_(user_ids),
        DeskSchedule.start_time >= start,
    )
    if end is not None:
        query = query.where(DeskSchedule.start_time < end)
    result = await session.execute(query)
    return list(result.scalars().all())


async def list_members_with_attendance(
    org_id: str,
    session: AsyncSession,
    *,
    now: Optional[datetime] = None,
    tz: str = "UTC",
) -> list[MemberResponse]:
    """Members of the org with their bookings this year and last year."""
    members = await list_members(org_id, session)
    if not members:
        return []

    member_ids = [member.id for member in members]
    previous_year_start, this_year_start = attendance_windows(now, tz)

    this_year = group_by_user(
        await list_desk_schedules(member_ids, session, start=this_year_start)
    )
    previous_year = group_by_user(
        await list_desk_schedules(
            member_ids, session, start=previous_year_start, end=this_year_start
        )
    )

    log.debug(
        "org.members_listed",
        org_id=org_id,
        members=len(members),
        year_start=this_year_start.isoformat(),
    )
    return [
        MemberResponse(
            id=member.id,
            email=member.email,
            name=member.name,
            user_role=member.user_role,
            organization_id=member.organization_id,
            created_at=member.created_at,
            desk_schedules_this_year=[
                DeskScheduleResponse.model_validate(s) for s in this_year.get(member.id, [])
            ],
            desk_schedules_previous_year=[
                DeskScheduleResponse.model_validate(s)
                for s in previous_year.get(member.id, [])
            ],
        )
        for member in members
    ]


async def change_user_role(
    org_id: str,
    user_id: str,
    change: RoleChangeType,
    session: AsyncSession,
    *,
    changed_by: Optional[str] = None,
) -> User:
    """Promote or demote a member of the org.

    Users of other organizations are reported exactly like unknown ids.
    """
    target = await session.get(User, user_id)
    if not target or target.organization_id != org_id:
        raise HTTPException(status_code=404, detail="User not found")

    new_role = ROLE_CHANGE_TARGETS[change]
    previous_role = target.user_role
    target.user_role = new_role
    session.add(target)
    await session.flush()

    log.info(
        "org.member_role_changed",
        org_id=org_id,
        user_id=user_id,
        change=change.value,
        previous_role=previous_role,
        role=new_role.value,
        changed_by=changed_by,
    )
    return target
