"""Profile table access."""

from agentmart.models.profile import Profile, Role
from agentmart.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    table_name = "profiles"
    model = Profile

    async def list_all(self) -> list[Profile]:
        # role desc puts admins ahead of users
        rows = await self.table.select().order("role", desc=True).execute()
        return self._many(rows)

    async def create(
        self,
        user_id: str,
        first_name: str | None = None,
        last_name: str | None = None,
        role: Role = Role.USER,
    ) -> Profile:
        rows = await self.table.insert(
            {
                "id": user_id,
                "first_name": first_name,
                "last_name": last_name,
                "role": role.value,
            }
        )
        return self._created(rows)

    async def set_role(self, user_id: str, role: Role) -> Profile | None:
        rows = await self.table.update({"role": role.value}).eq("id", user_id).execute()
        return self._first(rows)
