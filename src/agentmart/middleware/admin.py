"""Admin authorization for back-office endpoints."""

from collections.abc import Callable
from functools import wraps
from typing import Any

import structlog
from fastapi import HTTPException, Request

from agentmart.config import settings
from agentmart.exceptions import AdminAccessDeniedError
from agentmart.session import UserSession

logger = structlog.get_logger()


def get_admin_session(request: Request) -> UserSession:
    """Return the caller's session, raising unless they are an admin.

    Raises:
        AdminAccessDeniedError: If the caller is logged out or not an admin.
    """
    session: UserSession = getattr(request.state, "session", None) or UserSession.anonymous()

    if not session.is_logged_in:
        logger.info("Admin access denied - not logged in", path=request.url.path)
        raise AdminAccessDeniedError

    if session.email and session.email.lower() in settings.admin_emails:
        return session

    if not session.is_admin:
        logger.warning(
            "Admin access denied - insufficient role",
            user_id=session.user_id,
            role=session.role.value,
        )
        raise AdminAccessDeniedError

    return session


def require_admin(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to require an admin session for endpoint access."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        request = kwargs.get("request")
        if request is None:
            for arg in args:
                if isinstance(arg, Request):
                    request = arg
                    break

        if request is None:
            raise HTTPException(status_code=500, detail="Request not found")

        get_admin_session(request)
        return await func(*args, **kwargs)

    return wrapper
