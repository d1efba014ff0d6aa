"""Admin contact request routes."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Query, Request, Response, status
from pydantic import BaseModel

from agentmart.config import settings
from agentmart.dependencies import ContactRepoDep
from agentmart.exceptions import RecordNotFoundError
from agentmart.middleware.admin import require_admin
from agentmart.middleware.rate_limit import limiter
from agentmart.models.contact import ContactRequest, ContactStatus

logger = structlog.get_logger()

router = APIRouter()


class StatusUpdate(BaseModel):
    status: ContactStatus


@router.get("", response_model=list[ContactRequest])
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def list_contact_requests(
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    contact_requests: ContactRepoDep,
    status_filter: Annotated[ContactStatus | None, Query(alias="status")] = None,
) -> list[ContactRequest]:
    """Newest first, optionally only one status."""
    return await contact_requests.list_requests(status_filter)


@router.patch("/{request_id}", response_model=ContactRequest)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def update_contact_request(
    request_id: str,
    data: StatusUpdate,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    contact_requests: ContactRepoDep,
) -> ContactRequest:
    updated = await contact_requests.update_status(request_id, data.status)
    if updated is None:
        raise RecordNotFoundError("Contact request", request_id)
    logger.info("Contact request updated", request_id=request_id, status=data.status.value)
    return updated


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(settings.RATE_LIMIT_ADMIN)
@require_admin
async def delete_contact_request(
    request_id: str,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    contact_requests: ContactRepoDep,
) -> None:
    if not await contact_requests.delete(request_id):
        raise RecordNotFoundError("Contact request", request_id)
