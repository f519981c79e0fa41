"""
API v1 Router

Admin endpoints operate on the organization of the session's user.
"""

from fastapi import APIRouter
from . import organization

router = APIRouter()

router.include_router(organization.router, prefix="/organization", tags=["Organization"])


@router.get("/", tags=["API"])
async def api_root():
    """API root — returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/organization",
            "/organization/members",
            "/organization/change-user-role",
        ],
    }
