"""Per-request user sessions.

A session is resolved once per request from the caller's access token and
passed explicitly to whatever needs to know who is calling.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from agentmart.backend import BackendClient
from agentmart.exceptions import BackendPermissionError
from agentmart.models.profile import Profile, Role
from agentmart.repositories.profiles import ProfileRepository

logger = structlog.get_logger()


@dataclass(frozen=True)
class UserSession:
    """Identity and role of the caller."""

    user_id: str | None = None
    email: str | None = None
    access_token: str | None = None
    profile: Profile | None = None

    @classmethod
    def anonymous(cls) -> "UserSession":
        return cls()

    @property
    def is_logged_in(self) -> bool:
        return self.user_id is not None

    @property
    def role(self) -> Role:
        return self.profile.role if self.profile else Role.USER

    @property
    def is_admin(self) -> bool:
        return self.is_logged_in and self.role == Role.ADMIN


class SessionResolver:
    """Turns an access token into a UserSession.

    Identities listed in ``admin_emails`` are promoted to admin the first
    time they are seen: their profile is created as an admin, or patched if
    it exists with another role.
    """

    def __init__(self, client: BackendClient, admin_emails: Iterable[str] = ()) -> None:
        self._client = client
        self._admin_emails = {email.strip().lower() for email in admin_emails if email.strip()}

    def is_pinned_admin(self, email: str | None) -> bool:
        if not email:
            return False
        return email.lower() in self._admin_emails

    async def resolve(self, access_token: str | None) -> UserSession:
        """Resolve a token, or return an anonymous session when there is none.

        Raises:
            BackendPermissionError: If the token is invalid or expired.
        """
        if not access_token:
            return UserSession.anonymous()

        user = await self._client.auth.get_user(access_token)
        user_id = user.get("id")
        if not user_id:
            raise BackendPermissionError("Invalid session", status_code=401)
        email = user.get("email")

        profiles = ProfileRepository(self._client.with_token(access_token))
        profile = await profiles.get(user_id)
        if self.is_pinned_admin(email):
            profile = await self._promote(profiles, user_id, profile)

        return UserSession(
            user_id=user_id,
            email=email,
            access_token=access_token,
            profile=profile,
        )

    async def _promote(
        self,
        profiles: ProfileRepository,
        user_id: str,
        profile: Profile | None,
    ) -> Profile:
        if profile is None:
            logger.info("Creating admin profile for pinned identity", user_id=user_id)
            return await profiles.create(user_id, "Admin", "User", Role.ADMIN)
        if profile.role != Role.ADMIN:
            logger.info("Promoting pinned identity to admin", user_id=user_id)
            updated = await profiles.set_role(user_id, Role.ADMIN)
            return updated or profile.model_copy(update={"role": Role.ADMIN})
        return profile
