"""Agent catalog, detail, purchase and download."""

from typing import Annotated, Literal

import structlog
from fastapi import APIRouter, Query, Request, Response
from pydantic import BaseModel

from agentmart.catalog import ALL_IMPORTANCE, AgentFilters, PriceSort, apply_agent_filters
from agentmart.config import settings
from agentmart.dependencies import AgentRepoDep, PurchaseServiceDep, SessionDep
from agentmart.exceptions import AgentNotFoundError, BackendError
from agentmart.files import content_disposition
from agentmart.middleware.rate_limit import limiter
from agentmart.models.agent import Agent, AgentDetail, Importance
from agentmart.models.purchase import Purchase
from agentmart.sample_data import SAMPLE_AGENTS, sample_agent_detail

logger = structlog.get_logger()

router = APIRouter(prefix="/services", tags=["services"])


# ==================== Pydantic Models ====================


class CatalogResponse(BaseModel):
    items: list[Agent]
    total: int
    fallback: bool = False


class AgentDetailResponse(BaseModel):
    agent: AgentDetail
    fallback: bool = False


# ==================== Endpoints ====================


@router.get("", response_model=CatalogResponse)
async def list_services(
    agents: AgentRepoDep,
    importance: Annotated[Literal["all"] | Importance, Query()] = ALL_IMPORTANCE,
    price_sort: Annotated[PriceSort, Query()] = PriceSort.NONE,
) -> CatalogResponse:
    """Catalog with optional importance filter and price sort.

    Falls back to the built-in sample catalog when the backend fails or has
    no agents yet.
    """
    fallback = False
    try:
        source: list[Agent] = await agents.list_all()
    except BackendError as e:
        logger.warning("Agent catalog unavailable, serving samples", error=e.message)
        source = []
    if not source:
        source = list(SAMPLE_AGENTS)
        fallback = True

    filters = AgentFilters(importance=importance, price_sort=price_sort)
    items = apply_agent_filters(source, filters)
    return CatalogResponse(items=items, total=len(items), fallback=fallback)


@router.get("/{agent_id}", response_model=AgentDetailResponse)
async def get_service(agent_id: str, agents: AgentRepoDep) -> AgentDetailResponse:
    """Agent detail, or the sample copy when the backend does not have it."""
    try:
        agent = await agents.get(agent_id)
    except BackendError as e:
        logger.warning("Agent lookup failed, trying samples", agent_id=agent_id, error=e.message)
        agent = None

    if agent is not None:
        return AgentDetailResponse(agent=AgentDetail(**agent.model_dump()))

    sample = sample_agent_detail(agent_id)
    if sample is None:
        raise AgentNotFoundError(agent_id)
    return AgentDetailResponse(agent=sample, fallback=True)


@router.post("/{agent_id}/purchase", response_model=Purchase)
@limiter.limit(settings.RATE_LIMIT_PURCHASE)
async def purchase_service(
    agent_id: str,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    session: SessionDep,
    purchases: PurchaseServiceDep,
) -> Purchase:
    """Buy an agent. Returns once the payment has settled."""
    return await purchases.checkout(session, agent_id)


@router.get("/{agent_id}/download")
async def download_service(
    agent_id: str,
    session: SessionDep,
    purchases: PurchaseServiceDep,
) -> Response:
    """Download the agent's JSON file. Requires a completed purchase."""
    filename, content = await purchases.download(session, agent_id)
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": content_disposition(filename)},
    )
