"""Query builder for the backend's PostgREST table endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from agentmart.exceptions import BackendError

if TYPE_CHECKING:
    from agentmart.backend.client import BackendClient

RETURN_REPRESENTATION = {"Prefer": "return=representation"}


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_content_range(header: str | None) -> int:
    """Return the total from a ``Content-Range: 0-9/25`` header."""
    if not header or "/" not in header:
        raise BackendError("Backend did not return a row count")
    total = header.rsplit("/", 1)[1]
    if total == "*":
        raise BackendError("Backend did not return a row count")
    return int(total)


class TableQuery:
    """A filtered read, update or delete against one table.

    Filters chain and nothing is sent until ``execute``, ``maybe_single``
    or ``count`` is awaited.
    """

    def __init__(
        self,
        client: BackendClient,
        table: str,
        method: str = "GET",
        columns: str = "*",
        body: dict[str, Any] | None = None,
    ) -> None:
        self._client = client
        self._table = table
        self._method = method
        self._columns = columns
        self._body = body
        self._filters: list[tuple[str, str]] = []
        self._order: list[str] = []
        self._offset: int | None = None
        self._limit: int | None = None

    @property
    def path(self) -> str:
        return f"/rest/v1/{self._table}"

    def eq(self, column: str, value: Any) -> Self:
        self._filters.append((column, f"eq.{_format_value(value)}"))
        return self

    def order(self, column: str, desc: bool = False) -> Self:
        self._order.append(f"{column}.{'desc' if desc else 'asc'}")
        return self

    def range(self, start: int, end: int) -> Self:
        """Restrict to rows ``start``..``end`` inclusive, zero-indexed."""
        self._offset = start
        self._limit = max(end - start + 1, 0)
        return self

    def limit(self, count: int) -> Self:
        self._limit = count
        return self

    def _params(self) -> list[tuple[str, str]]:
        params = [("select", self._columns), *self._filters]
        if self._order:
            params.append(("order", ",".join(self._order)))
        if self._offset is not None:
            params.append(("offset", str(self._offset)))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        return params

    async def execute(self) -> list[dict[str, Any]]:
        """Run the query and return the affected or selected rows."""
        headers = None if self._method == "GET" else RETURN_REPRESENTATION
        response = await self._client.request(
            self._method,
            self.path,
            params=self._params(),
            json=self._body,
            headers=headers,
        )
        if not response.content:
            return []
        rows = response.json()
        return rows if isinstance(rows, list) else [rows]

    async def maybe_single(self) -> dict[str, Any] | None:
        self._limit = 1
        rows = await self.execute()
        return rows[0] if rows else None

    async def count(self) -> int:
        """Return the exact number of rows matching the filters."""
        response = await self._client.request(
            "HEAD",
            self.path,
            params=[("select", self._columns), *self._filters],
            headers={"Prefer": "count=exact"},
        )
        return parse_content_range(response.headers.get("content-range"))


class Table:
    """Entry point for queries against a single table."""

    def __init__(self, client: BackendClient, name: str) -> None:
        self._client = client
        self.name = name

    def select(self, columns: str = "*") -> TableQuery:
        return TableQuery(self._client, self.name, columns=columns)

    async def insert(self, values: dict[str, Any] | list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Insert one or more rows and return them as stored."""
        response = await self._client.request(
            "POST",
            f"/rest/v1/{self.name}",
            json=values,
            headers=RETURN_REPRESENTATION,
        )
        rows = response.json() if response.content else []
        return rows if isinstance(rows, list) else [rows]

    def update(self, values: dict[str, Any]) -> TableQuery:
        return TableQuery(self._client, self.name, method="PATCH", body=values)

    def delete(self) -> TableQuery:
        return TableQuery(self._client, self.name, method="DELETE")
