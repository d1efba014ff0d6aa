"""Saved drafts of the admin agent upload form."""

import json
from decimal import Decimal
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from agentmart.models.agent import Importance
from agentmart.redis_client import RedisClient

logger = structlog.get_logger()

DRAFT_KEY_PREFIX = "agentmart:draft:agent-upload"


class AgentDraft(BaseModel):
    """Unsubmitted agent form fields. Every field may still be empty."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    description: str = ""
    price: Decimal | None = None
    importance: Importance = Importance.MEDIUM
    how_to_use: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.description or self.how_to_use) and self.price is None


class DraftStore:
    """Keeps one agent form draft per admin, last write wins."""

    def __init__(self, redis: RedisClient, ttl_seconds: int | None = None) -> None:
        self._redis = redis
        self._ttl = ttl_seconds

    @staticmethod
    def key(user_id: str) -> str:
        return f"{DRAFT_KEY_PREFIX}:{user_id}"

    async def get(self, user_id: str) -> AgentDraft | None:
        try:
            data: Any = await self._redis.get_json(self.key(user_id))
            if data is None:
                return None
            return AgentDraft.model_validate(data)
        except (json.JSONDecodeError, PydanticValidationError):
            logger.warning("Discarding unreadable draft", user_id=user_id)
            await self._redis.delete(self.key(user_id))
            return None

    async def save(self, user_id: str, draft: AgentDraft) -> None:
        await self._redis.set_json(self.key(user_id), draft.model_dump(mode="json"), ex=self._ttl)

    async def clear(self, user_id: str) -> None:
        await self._redis.delete(self.key(user_id))
