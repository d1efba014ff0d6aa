"""Identity endpoints of the hosted backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from agentmart.backend.client import BackendClient

ADMIN_USERS_PAGE_SIZE = 1000


class AuthApi:
    """Thin wrapper over the backend's auth REST API."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Return the user behind an access token.

        Raises:
            BackendPermissionError: If the token is invalid or expired.
        """
        response = await self._client.request("GET", "/auth/v1/user", bearer=access_token)
        user: dict[str, Any] = response.json()
        return user

    async def sign_out(self, access_token: str) -> None:
        await self._client.request("POST", "/auth/v1/logout", bearer=access_token)

    async def admin_list_users(self) -> dict[str, str]:
        """Map every user id to its e-mail. Needs the service-role key."""
        emails: dict[str, str] = {}
        page = 1
        while True:
            response = await self._client.request(
                "GET",
                "/auth/v1/admin/users",
                params={"page": str(page), "per_page": str(ADMIN_USERS_PAGE_SIZE)},
                use_service_role=True,
            )
            body = response.json()
            users = body.get("users", []) if isinstance(body, dict) else body
            for user in users:
                if user.get("id") and user.get("email"):
                    emails[user["id"]] = user["email"]
            if len(users) < ADMIN_USERS_PAGE_SIZE:
                return emails
            page += 1
