"""Client for the hosted backend (tables, storage, auth)."""

from agentmart.backend.client import BackendClient, raise_for_backend_error
from agentmart.backend.tables import Table, TableQuery

__all__ = ["BackendClient", "Table", "TableQuery", "raise_for_backend_error"]
