"""Organization model."""

from sqlmodel import Field, SQLModel

from .base import IdMixin, TimestampMixin


class Organization(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(nullable=False, index=True)
