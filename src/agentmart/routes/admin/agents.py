"""Admin agent management routes."""

from decimal import Decimal
from typing import Annotated

import structlog
from fastapi import APIRouter, File, Form, Query, Request, Response, UploadFile, status

from agentmart.config import settings
from agentmart.dependencies import AdminAgentServiceDep, AgentRepoDep, DraftStoreDep
from agentmart.drafts import AgentDraft
from agentmart.middleware.admin import get_admin_session, require_admin
from agentmart.middleware.rate_limit import limiter
from agentmart.models.agent import Agent, Importance
from agentmart.routes.agents import AgentListResponse

logger = structlog.get_logger()

router = APIRouter()


# ==================== Draft ====================


@router.get("/draft", response_model=AgentDraft | None)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def get_draft(
    request: Request,
    response: Response,  # noqa: ARG001
    drafts: DraftStoreDep,
) -> AgentDraft | None:
    """The caller's saved upload form, if any."""
    session = get_admin_session(request)
    return await drafts.get(session.user_id or "")


@router.put("/draft", response_model=AgentDraft)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def save_draft(
    draft: AgentDraft,
    request: Request,
    response: Response,  # noqa: ARG001
    drafts: DraftStoreDep,
) -> AgentDraft:
    """Replace the caller's saved upload form."""
    session = get_admin_session(request)
    await drafts.save(session.user_id or "", draft)
    return draft


@router.delete("/draft", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def clear_draft(
    request: Request,
    response: Response,  # noqa: ARG001
    drafts: DraftStoreDep,
) -> None:
    session = get_admin_session(request)
    await drafts.clear(session.user_id or "")


# ==================== Agents ====================


@router.get("", response_model=AgentListResponse)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def list_agents(
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    agents: AgentRepoDep,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
) -> AgentListResponse:
    result = await agents.fetch_page(page, page_size)
    return AgentListResponse(
        items=result.agents,
        total=result.total_count,
        page=result.current_page,
        page_size=result.page_size,
        total_pages=result.total_pages,
        has_more=result.has_more,
    )


@router.post("", response_model=Agent, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def create_agent(
    request: Request,
    response: Response,  # noqa: ARG001
    service: AdminAgentServiceDep,
    file: Annotated[UploadFile, File()],
    name: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    price: Annotated[Decimal | None, Form(ge=0)] = None,
    importance: Annotated[Importance, Form()] = Importance.MEDIUM,
    how_to_use: Annotated[str | None, Form()] = None,
) -> Agent:
    """Upload an agent JSON file and publish the agent."""
    session = get_admin_session(request)
    # One byte past the limit is enough to report the file as too large
    content = await file.read(settings.MAX_AGENT_FILE_BYTES + 1)
    form = AgentDraft(
        name=name,
        description=description,
        price=price,
        importance=importance,
        how_to_use=how_to_use,
    )
    return await service.create_agent(
        session,
        form,
        file.filename or "",
        file.content_type,
        content,
    )


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def delete_agent(
    agent_id: str,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    service: AdminAgentServiceDep,
) -> None:
    await service.delete_agent(agent_id)
