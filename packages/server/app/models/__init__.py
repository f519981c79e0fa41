# SQLModel definitions — imported here to ensure metadata is populated for create_all.
from .base import IdMixin, TimestampMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .user import User  # noqa: F401
from .desk_schedule import DeskSchedule  # noqa: F401
