"""Rate limiting using slowapi."""

import structlog
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from agentmart.config import settings

logger = structlog.get_logger()


def get_client_identifier(request: Request) -> str:
    """Rate limit key: the signed-in user, else the client IP."""
    user_id = getattr(request.state, "user_id", None)
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"


def _create_limiter() -> Limiter:
    storage_uri = settings.RATE_LIMIT_STORAGE_URI
    if storage_uri:
        logger.info("Rate limiter using shared storage")
    return Limiter(
        key_func=get_client_identifier,
        storage_uri=storage_uri or "memory://",
        strategy="fixed-window",
        headers_enabled=True,
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = _create_limiter()
