"""HTTP client for the hosted Supabase backend."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from agentmart.backend.auth import AuthApi
from agentmart.backend.storage import StorageApi
from agentmart.backend.tables import Table
from agentmart.exceptions import (
    BackendConnectionError,
    BackendError,
    BackendNotFoundError,
    BackendPermissionError,
)

logger = structlog.get_logger()

PERMISSION_STATUSES = {401, 403}


def _error_message(response: httpx.Response) -> tuple[str, str | None, int | None]:
    """Pull the service's message, code and embedded status out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return (response.text or response.reason_phrase or "Backend request failed", None, None)

    if not isinstance(body, dict):
        return (str(body), None, None)

    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or "Backend request failed"
    )
    code = body.get("code") or body.get("error_code")
    embedded: int | None = None
    # Storage reports its own status inside the body, sometimes as a string
    raw_status = body.get("statusCode")
    if raw_status is not None:
        try:
            embedded = int(raw_status)
        except (TypeError, ValueError):
            embedded = None
    return (str(message), str(code) if code is not None else None, embedded)


def raise_for_backend_error(response: httpx.Response) -> None:
    """Translate a non-2xx backend response into a BackendError subclass."""
    if response.is_success:
        return

    message, code, embedded = _error_message(response)
    status = response.status_code
    if status in PERMISSION_STATUSES or embedded in PERMISSION_STATUSES or code == "42501":
        raise BackendPermissionError(message, status_code=status, code=code)
    if status == 404 or embedded == 404:
        raise BackendNotFoundError(message, status_code=status, code=code)
    raise BackendError(message, status_code=status, code=code)


class BackendClient:
    """Client for the hosted backend's table, storage and auth endpoints.

    One instance owns the underlying ``httpx.AsyncClient``. ``with_token``
    derives per-user clients that share the connection pool but send the
    user's access token, so the backend's row policies see the real caller.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        access_token: str | None = None,
        service_role_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.service_role_key = service_role_key
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=10.0),
        )
        self.storage = StorageApi(self)
        self.auth = AuthApi(self)

    def with_token(self, access_token: str | None) -> BackendClient:
        """Return a client acting as the given user (or anonymously for None)."""
        return BackendClient(
            self.url,
            self.api_key,
            access_token=access_token,
            service_role_key=self.service_role_key,
            http_client=self._http,
        )

    def table(self, name: str) -> Table:
        return Table(self, name)

    @property
    def has_service_role(self) -> bool:
        return bool(self.service_role_key)

    def _auth_headers(self, use_service_role: bool = False) -> dict[str, str]:
        if use_service_role and self.service_role_key:
            return {
                "apikey": self.service_role_key,
                "Authorization": f"Bearer {self.service_role_key}",
            }
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | dict[str, str] | None = None,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        use_service_role: bool = False,
        bearer: str | None = None,
    ) -> httpx.Response:
        """Send one request to the backend and raise on error responses.

        Args:
            method: HTTP method.
            path: Path below the project URL, e.g. ``/rest/v1/agents``.
            params: Query parameters (a list keeps repeated keys).
            json: JSON body.
            content: Raw body, used for storage uploads.
            headers: Extra headers merged over the auth headers.
            use_service_role: Authenticate with the service-role key.
            bearer: Explicit bearer token overriding the client's own.
        """
        request_headers = self._auth_headers(use_service_role)
        if bearer:
            request_headers["Authorization"] = f"Bearer {bearer}"
        if headers:
            request_headers.update(headers)

        try:
            response = await self._http.request(
                method,
                f"{self.url}{path}",
                params=params,
                json=json,
                content=content,
                headers=request_headers,
            )
        except httpx.HTTPError as e:
            logger.warning("Backend request failed", method=method, path=path, error=str(e))
            raise BackendConnectionError(str(e)) from e

        if not response.is_success:
            logger.warning(
                "Backend returned error",
                method=method,
                path=path,
                status_code=response.status_code,
            )
        raise_for_backend_error(response)
        return response

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()
