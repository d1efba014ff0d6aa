"""Async Redis client used for admin form drafts."""

import json
from typing import Any, cast

import redis.asyncio as redis
import structlog

logger = structlog.get_logger()


class RedisClient:
    """Async Redis client wrapper."""

    def __init__(self, url: str, decode_responses: bool = True) -> None:
        self._url = url
        self._decode_responses = decode_responses
        self._client: Any = None

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._client is not None:
            return
        self._client = redis.from_url(  # type: ignore[no-untyped-call]
            self._url,
            decode_responses=self._decode_responses,
        )
        logger.info("Connected to Redis", url=self._url)

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._client:
            await self._client.aclose()
            self._client = None
        logger.info("Disconnected from Redis")

    @property
    def client(self) -> Any:
        """Get the underlying Redis client."""
        if self._client is None:
            raise RuntimeError("Redis client not connected. Call connect() first.")
        return self._client

    async def get(self, key: str) -> str | None:
        result = await self.client.get(key)
        return cast("str | None", result)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        """Set a value with optional expiration in seconds."""
        result = await self.client.set(key, value, ex=ex)
        return bool(result)

    async def delete(self, *keys: str) -> int:
        result = await self.client.delete(*keys)
        return cast("int", result)

    async def get_json(self, key: str) -> Any:
        """Get and parse a JSON value, or None when the key is missing."""
        value = await self.get(key)
        if value is None:
            return None
        return json.loads(value)

    async def set_json(self, key: str, value: Any, ex: int | None = None) -> bool:
        return await self.set(key, json.dumps(value), ex=ex)


_redis_clients: dict[str, RedisClient] = {}


def get_redis_client(url: str) -> RedisClient:
    """Get or create the client for a Redis URL."""
    if url not in _redis_clients:
        _redis_clients[url] = RedisClient(url)
    return _redis_clients[url]


def clear_redis_clients() -> None:
    """Forget cached clients (used by tests)."""
    _redis_clients.clear()
