"""Shared plumbing for table repositories."""

from typing import Any, ClassVar, Generic, TypeVar

import structlog
from pydantic import BaseModel

from agentmart.backend import BackendClient, Table
from agentmart.exceptions import MalformedRecordError
from agentmart.models.result import validate_row, validate_rows

logger = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)


class BaseRepository(Generic[M]):
    """Reads and writes one table, validating every row it returns."""

    table_name: ClassVar[str]
    model: type[M]

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    @property
    def table(self) -> Table:
        return self._client.table(self.table_name)

    def _one(self, row: Any) -> M:
        result = validate_row(self.model, row)
        if not result.ok or result.value is None:
            logger.warning("Malformed record", table=self.table_name, error=result.error)
            raise MalformedRecordError(self.table_name, result.error or "empty row")
        return result.value

    def _many(self, rows: list[dict[str, Any]]) -> list[M]:
        result = validate_rows(self.model, rows)
        if not result.ok or result.value is None:
            logger.warning("Malformed records", table=self.table_name, error=result.error)
            raise MalformedRecordError(self.table_name, result.error or "empty result")
        return result.value

    def _first(self, rows: list[dict[str, Any]]) -> M | None:
        return self._one(rows[0]) if rows else None

    async def get(self, record_id: str) -> M | None:
        row = await self.table.select().eq("id", record_id).maybe_single()
        return self._one(row) if row is not None else None

    async def delete(self, record_id: str) -> bool:
        """Delete by id. Returns False when nothing matched."""
        rows = await self.table.delete().eq("id", record_id).execute()
        return bool(rows)

    def _created(self, rows: list[dict[str, Any]]) -> M:
        if not rows:
            raise MalformedRecordError(self.table_name, "write returned no row")
        return self._one(rows[0])
