from enum import Enum
from pydantic import BaseModel


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class RoleChangeType(str, Enum):
    PROMOTE_TO_ADMIN = "PROMOTE_TO_ADMIN"
    DEMOTE_FROM_ADMIN = "DEMOTE_FROM_ADMIN"


# Role each change type assigns to the target user
ROLE_CHANGE_TARGETS: dict["RoleChangeType", "UserRole"] = {
    RoleChangeType.PROMOTE_TO_ADMIN: UserRole.ADMIN,
    RoleChangeType.DEMOTE_FROM_ADMIN: UserRole.MEMBER,
}


class ErrorDetail(BaseModel):
    code: str
    message: str
    status: int


class ErrorResponse(BaseModel):
    error: ErrorDetail
