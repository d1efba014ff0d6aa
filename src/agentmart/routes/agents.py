"""Paginated agent listing."""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel

from agentmart.config import settings
from agentmart.dependencies import AgentRepoDep
from agentmart.models.agent import Agent

router = APIRouter(prefix="/agents", tags=["agents"])


class AgentListResponse(BaseModel):
    items: list[Agent]
    total: int
    page: int
    page_size: int
    total_pages: int
    has_more: bool


@router.get("", response_model=AgentListResponse)
async def list_agents(
    agents: AgentRepoDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(ge=1)] = None,
) -> AgentListResponse:
    """List agents newest first. Pages past the end are empty."""
    size = min(page_size or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
    result = await agents.fetch_page(page, size)
    return AgentListResponse(
        items=result.agents,
        total=result.total_count,
        page=result.current_page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        has_more=result.has_more,
    )
