"""Object storage endpoints of the hosted backend."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import structlog

if TYPE_CHECKING:
    from agentmart.backend.client import BackendClient

logger = structlog.get_logger()


def _object_path(bucket: str, path: str) -> str:
    return f"/storage/v1/object/{quote(bucket)}/{quote(path.lstrip('/'))}"


class StorageApi:
    """Bucket and object operations."""

    def __init__(self, client: BackendClient) -> None:
        self._client = client

    async def list_buckets(self) -> list[dict[str, Any]]:
        response = await self._client.request("GET", "/storage/v1/bucket")
        buckets = response.json()
        return buckets if isinstance(buckets, list) else []

    async def create_bucket(self, name: str, public: bool = False) -> None:
        await self._client.request(
            "POST",
            "/storage/v1/bucket",
            json={"id": name, "name": name, "public": public},
        )
        logger.info("Created storage bucket", bucket=name, public=public)

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        upsert: bool = True,
    ) -> str:
        """Upload an object and return its key inside the bucket."""
        await self._client.request(
            "POST",
            _object_path(bucket, path),
            content=content,
            headers={
                "Content-Type": content_type,
                "x-upsert": "true" if upsert else "false",
            },
        )
        return path

    async def download(self, bucket: str, path: str) -> bytes:
        response = await self._client.request("GET", _object_path(bucket, path))
        return response.content

    async def remove(self, bucket: str, paths: list[str]) -> None:
        await self._client.request(
            "DELETE",
            f"/storage/v1/object/{quote(bucket)}",
            json={"prefixes": paths},
        )
