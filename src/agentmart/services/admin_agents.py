"""Agent management for the admin back-office."""

from decimal import Decimal

import structlog

from agentmart.drafts import AgentDraft, DraftStore
from agentmart.exceptions import (
    AgentNotFoundError,
    AgentUploadError,
    BackendError,
    MissingFieldsError,
)
from agentmart.files import AgentFileStore
from agentmart.models.agent import Agent, AgentCreate
from agentmart.repositories.agents import AgentRepository
from agentmart.session import UserSession

logger = structlog.get_logger()


class AdminAgentService:
    def __init__(
        self,
        agents: AgentRepository,
        files: AgentFileStore,
        drafts: DraftStore,
    ) -> None:
        self._agents = agents
        self._files = files
        self._drafts = drafts

    async def create_agent(
        self,
        session: UserSession,
        form: AgentDraft,
        filename: str,
        content_type: str | None,
        content: bytes,
    ) -> Agent:
        """Upload the agent's file and insert the agent row.

        The caller's draft is cleared on success. On any failure the
        submitted fields are kept as the draft so the form can be restored.

        Raises:
            MissingFieldsError: If the name is empty.
            AgentUploadError: If the file failed validation or storage.
            BackendError: If the insert failed.
        """
        user_id = session.user_id or ""
        if not form.name:
            await self._keep_draft(user_id, form)
            raise MissingFieldsError(["name"])

        upload = await self._files.upload_json_file(filename, content_type, content)
        if not upload.ok or upload.value is None:
            await self._keep_draft(user_id, form)
            raise AgentUploadError(upload.error or "Upload failed")

        try:
            agent = await self._agents.create(
                AgentCreate(
                    name=form.name,
                    description=form.description,
                    price=form.price if form.price is not None else Decimal(0),
                    importance=form.importance,
                    how_to_use=form.how_to_use or None,
                    json_file_url=upload.value,
                    created_by=session.user_id,
                )
            )
        except BackendError:
            await self._keep_draft(user_id, form)
            raise

        if user_id:
            await self._drafts.clear(user_id)
        logger.info("Agent created", agent_id=agent.id, created_by=session.user_id)
        return agent

    async def delete_agent(self, agent_id: str) -> None:
        """Delete an agent and then its stored file."""
        agent = await self._agents.get(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)

        await self._agents.delete(agent_id)
        logger.info("Agent deleted", agent_id=agent_id)

        if agent.json_file_url:
            try:
                await self._files.remove_json_file(agent.json_file_url)
            except BackendError as e:
                # The row is gone; an orphaned object is only a storage leak
                logger.warning(
                    "Could not remove agent file",
                    agent_id=agent_id,
                    path=agent.json_file_url,
                    error=e.message,
                )

    async def _keep_draft(self, user_id: str, form: AgentDraft) -> None:
        if user_id and not form.is_empty:
            await self._drafts.save(user_id, form)
