"""User profile models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Role(str, Enum):
    """Access classification of a user."""

    USER = "user"
    ADMIN = "admin"


class Profile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str | None = None
    last_name: str | None = None
    role: Role = Role.USER
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class UserSummary(BaseModel):
    """Profile joined with the identity provider's e-mail, as shown to admins."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: Role = Role.USER
    created_at: datetime | None = None
    is_protected: bool = False
