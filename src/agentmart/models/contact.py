"""Contact request models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactStatus(str, Enum):
    """Lifecycle of a contact request."""

    NEW = "new"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class ContactRequest(BaseModel):
    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True)

    id: str
    name: str
    email: str
    message: str
    status: ContactStatus = ContactStatus.NEW
    created_at: datetime | None = None


class ContactRequestCreate(BaseModel):
    """Public contact form submission."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    message: str = Field(min_length=1, max_length=5000)
