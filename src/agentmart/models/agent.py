"""Agent models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Prices travel as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Importance(str, Enum):
    """Priority classification of an agent."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class FAQ(BaseModel):
    question: str
    answer: str


class Agent(BaseModel):
    """An agent as stored in the ``agents`` table."""

    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True)

    id: str
    name: str
    description: str = ""
    price: Money = Field(default=Decimal(0), ge=0)
    importance: Importance = Importance.MEDIUM
    how_to_use: str | None = None
    json_file_url: str | None = None
    created_at: datetime | None = None
    created_by: str | None = None


class AgentDetail(Agent):
    """Agent with the extra copy shown on its detail page."""

    faqs: list[FAQ] = []


class AgentCreate(BaseModel):
    """Insert payload for a new agent."""

    name: str = Field(min_length=1)
    description: str = ""
    price: Money = Field(default=Decimal(0), ge=0)
    importance: Importance = Importance.MEDIUM
    how_to_use: str | None = None
    json_file_url: str
    created_by: str | None = None


class AgentPage(BaseModel):
    """One page of the agent listing."""

    agents: list[Agent]
    total_count: int
    total_pages: int
    current_page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        return self.current_page < self.total_pages
