"""Contact request table access."""

from agentmart.models.contact import ContactRequest, ContactRequestCreate, ContactStatus
from agentmart.repositories.base import BaseRepository


class ContactRequestRepository(BaseRepository[ContactRequest]):
    table_name = "contact_requests"
    model = ContactRequest

    async def submit(self, request: ContactRequestCreate) -> ContactRequest:
        payload = request.model_dump(mode="json")
        payload["status"] = ContactStatus.NEW.value
        rows = await self.table.insert(payload)
        return self._created(rows)

    async def list_requests(self, status: ContactStatus | None = None) -> list[ContactRequest]:
        """List requests newest first, optionally only those in one status."""
        query = self.table.select()
        if status is not None:
            query = query.eq("status", status.value)
        rows = await query.order("created_at", desc=True).execute()
        return self._many(rows)

    async def update_status(
        self,
        request_id: str,
        status: ContactStatus,
    ) -> ContactRequest | None:
        rows = await self.table.update({"status": status.value}).eq("id", request_id).execute()
        return self._first(rows)
