"""User listing and role changes for the admin back-office."""

from collections.abc import Iterable

import structlog

from agentmart.backend import BackendClient
from agentmart.catalog import search_users
from agentmart.exceptions import BackendError, ProtectedRoleError, RecordNotFoundError
from agentmart.models.profile import Profile, Role, UserSummary
from agentmart.repositories.profiles import ProfileRepository

logger = structlog.get_logger()


class UserAdminService:
    def __init__(
        self,
        client: BackendClient,
        profiles: ProfileRepository,
        admin_emails: Iterable[str] = (),
    ) -> None:
        self._client = client
        self._profiles = profiles
        self._admin_emails = {email.lower() for email in admin_emails}

    async def _emails(self) -> dict[str, str]:
        if not self._client.has_service_role:
            return {}
        try:
            return await self._client.auth.admin_list_users()
        except BackendError as e:
            logger.warning("Could not load user e-mails", error=e.message)
            return {}

    async def list_users(self, query: str | None = None) -> list[UserSummary]:
        """Profiles with e-mails where known, admins first, filtered by ``query``."""
        profiles = await self._profiles.list_all()
        emails = await self._emails()

        users = []
        for profile in profiles:
            email = emails.get(profile.id)
            users.append(
                UserSummary(
                    id=profile.id,
                    email=email,
                    first_name=profile.first_name,
                    last_name=profile.last_name,
                    role=profile.role,
                    created_at=profile.created_at,
                    is_protected=profile.role == Role.ADMIN
                    or bool(email and email.lower() in self._admin_emails),
                )
            )
        return search_users(users, query)

    async def toggle_role(self, user_id: str) -> Profile:
        """Promote a user to admin. Admins and pinned e-mails cannot be changed."""
        profile = await self._profiles.get(user_id)
        if profile is None:
            raise RecordNotFoundError("User", user_id)
        if profile.role == Role.ADMIN:
            raise ProtectedRoleError
        if self._admin_emails:
            email = (await self._emails()).get(user_id)
            if email and email.lower() in self._admin_emails:
                raise ProtectedRoleError

        updated = await self._profiles.set_role(user_id, Role.ADMIN)
        logger.info("User promoted to admin", user_id=user_id)
        return updated or profile.model_copy(update={"role": Role.ADMIN})
