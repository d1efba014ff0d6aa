"""Public contact form."""

import structlog
from fastapi import APIRouter, Request, Response, status

from agentmart.config import settings
from agentmart.dependencies import ContactRepoDep
from agentmart.middleware.rate_limit import limiter
from agentmart.models.contact import ContactRequest, ContactRequestCreate

logger = structlog.get_logger()

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("", response_model=ContactRequest, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_CONTACT)
async def submit_contact_request(
    data: ContactRequestCreate,
    request: Request,  # noqa: ARG001
    response: Response,  # noqa: ARG001
    contact_requests: ContactRepoDep,
) -> ContactRequest:
    """Store a contact form submission with status ``new``."""
    created = await contact_requests.submit(data)
    logger.info("Contact request received", request_id=created.id)
    return created
