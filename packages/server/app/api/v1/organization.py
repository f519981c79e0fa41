"""
Organization administration endpoints (Admin only).

GET    /api/v1/organization                    — The caller's organization (or null)
GET    /api/v1/organization/members            — Members with yearly office attendance
POST   /api/v1/organization/change-user-role   — Promote/demote a member
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import AuthenticatedUser, require_org_admin
from app.core.config import get_settings
from app.core.database import get_session
from app.services import organizations as org_service
from desk_planner_shared.schemas.organizations import (
    MemberListResponse,
    OrganizationResponse,
)
from desk_planner_shared.schemas.users import ChangeUserRoleRequest

settings = get_settings()
router = APIRouter()


@router.get("", response_model=Optional[OrganizationResponse], tags=["Organization"])
async def get_organization(
    auth: AuthenticatedUser = Depends(require_org_admin),
    session: AsyncSession = Depends(get_session),
):
    """Get the caller's organization. Returns null if the record is gone."""
    org = await org_service.get_organization(auth.organization_id, session)
    if org is None:
        return None
    return OrganizationResponse.model_validate(org)


@router.get(
    "/members",
    response_model=MemberListResponse,
    response_model_by_alias=True,
    tags=["Organization"],
)
async def get_members(
    auth: AuthenticatedUser = Depends(require_org_admin),
    session: AsyncSession = Depends(get_session),
):
    """List members with their desk schedules for this and the previous year."""
    members = await org_service.list_members_with_attendance(
        auth.organization_id, session, tz=settings.attendance_timezone
    )
    return MemberListResponse(data=members)


def _request_schema(model: type[BaseModel]) -> dict:
    """JSON schema of a request model with its nested definitions inlined."""
    schema = model.model_json_schema()
    defs = schema.pop("$defs", {})
    for prop in schema.get("properties", {}).values():
        ref = prop.pop("$ref", None)
        if ref:
            prop.update(defs[ref.rsplit("/", 1)[-1]])
    return schema


async def read_change_user_role_request(
    request: Request,
    auth: AuthenticatedUser = Depends(require_org_admin),
) -> ChangeUserRoleRequest:
    """Parse the body only once the caller passed the admin checks."""
    try:
        return ChangeUserRoleRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors(include_url=False)]
        )


@router.post(
    "/change-user-role",
    status_code=204,
    tags=["Organization"],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": _request_schema(ChangeUserRoleRequest)}
            },
        }
    },
)
async def change_user_role(
    body: ChangeUserRoleRequest = Depends(read_change_user_role_request),
    auth: AuthenticatedUser = Depends(require_org_admin),
    session: AsyncSession = Depends(get_session),
):
    """Promote a member to admin or demote an admin to member."""
    await org_service.change_user_role(
        auth.organization_id,
        body.user_id,
        body.type,
        session,
        changed_by=auth.user_id,
    )
    return Response(status_code=204)
