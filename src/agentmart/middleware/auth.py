"""Authentication middleware that attaches a UserSession to each request."""

import json
from collections.abc import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from agentmart.config import settings
from agentmart.exceptions import BackendConnectionError, BackendError, BackendPermissionError
from agentmart.session import SessionResolver, UserSession

logger = structlog.get_logger()


def _create_error_response(request: Request, detail: str, status_code: int) -> Response:
    """Create a JSON error response with CORS headers.

    Without the CORS headers the browser hides 401 bodies from the page.
    """
    response = Response(
        content=json.dumps({"detail": detail}),
        status_code=status_code,
        media_type="application/json",
    )
    origin = request.headers.get("origin")
    if origin and origin in settings.CORS_ORIGINS:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


def extract_bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        parts = auth_header.split(" ")
        if len(parts) == 2 and parts[1]:
            return parts[1]
    return None


class AuthMiddleware(BaseHTTPMiddleware):
    """Resolve the bearer token into ``request.state.session``.

    Requests without a token proceed anonymously. Requests with a token the
    identity provider rejects get a 401 straight away.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request.state.session = UserSession.anonymous()
        request.state.user_id = None

        if request.method == "OPTIONS":
            return await call_next(request)

        token = extract_bearer_token(request)
        if not token:
            return await call_next(request)

        resolver: SessionResolver = request.app.state.session_resolver
        try:
            session = await resolver.resolve(token)
        except BackendPermissionError as e:
            logger.warning("Session token rejected", error=e.message)
            return _create_error_response(request, "Invalid or expired token", 401)
        except BackendConnectionError as e:
            logger.warning("Identity provider unreachable", error=e.message)
            return _create_error_response(request, "Authentication service unavailable", 503)
        except BackendError as e:
            logger.warning("Session lookup failed", error=e.message)
            return _create_error_response(request, "Could not verify session", 502)

        request.state.session = session
        request.state.user_id = session.user_id
        return await call_next(request)
