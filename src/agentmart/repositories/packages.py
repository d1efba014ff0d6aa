"""Package table access."""

from agentmart.models.package import Package, PackageCreate, normalize_features
from agentmart.repositories.base import BaseRepository


class PackageRepository(BaseRepository[Package]):
    table_name = "packages"
    model = Package

    async def list_all(self) -> list[Package]:
        rows = await self.table.select().order("name").execute()
        return self._many(rows)

    async def create(self, package: PackageCreate) -> Package:
        rows = await self.table.insert(package.model_dump(mode="json"))
        return self._created(rows)

    async def update_features(self, package_id: str, features: list[str]) -> Package | None:
        rows = (
            await self.table.update({"features": normalize_features(features)})
            .eq("id", package_id)
            .execute()
        )
        return self._first(rows)

    async def set_popular(self, package_id: str, is_popular: bool) -> Package | None:
        rows = await self.table.update({"is_popular": is_popular}).eq("id", package_id).execute()
        return self._first(rows)
