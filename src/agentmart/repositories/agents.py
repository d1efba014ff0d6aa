"""Agent table access, including the paginated listing."""

import math

from agentmart.models.agent import Agent, AgentCreate, AgentPage
from agentmart.repositories.base import BaseRepository


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """Zero-indexed inclusive row range for a 1-indexed page."""
    start = (page - 1) * page_size
    return start, start + page_size - 1


def total_pages(total_count: int, page_size: int) -> int:
    if total_count <= 0 or page_size <= 0:
        return 0
    return math.ceil(total_count / page_size)


class AgentRepository(BaseRepository[Agent]):
    table_name = "agents"
    model = Agent

    async def fetch_page(self, page: int, page_size: int) -> AgentPage:
        """Return one page of agents, newest first.

        Pages past the end come back empty rather than raising.
        """
        start, end = page_bounds(page, page_size)
        count = await self.table.select("id").count()

        agents: list[Agent] = []
        if 0 <= start < count:
            rows = (
                await self.table.select()
                .order("created_at", desc=True)
                .range(start, end)
                .execute()
            )
            agents = self._many(rows)

        return AgentPage(
            agents=agents,
            total_count=count,
            total_pages=total_pages(count, page_size),
            current_page=page,
            page_size=page_size,
        )

    async def list_all(self) -> list[Agent]:
        rows = await self.table.select().order("created_at", desc=True).execute()
        return self._many(rows)

    async def create(self, agent: AgentCreate) -> Agent:
        rows = await self.table.insert(agent.model_dump(mode="json", exclude_none=True))
        return self._created(rows)
