"""Checkout and the purchase-gated download."""

import structlog

from agentmart.exceptions import (
    AgentFileMissingError,
    AgentNotFoundError,
    AuthenticationRequiredError,
    BackendError,
    PaymentDeclinedError,
    PaymentGatewayError,
    PurchaseRequiredError,
)
from agentmart.files import AgentFileStore, download_filename
from agentmart.models.purchase import PaymentStatus, Purchase
from agentmart.payments import PaymentEvent, PaymentGateway
from agentmart.repositories.agents import AgentRepository
from agentmart.repositories.purchases import PurchaseRepository
from agentmart.session import UserSession

logger = structlog.get_logger()


class PurchaseService:
    """Runs purchases through their payment lifecycle and gates downloads."""

    def __init__(
        self,
        agents: AgentRepository,
        purchases: PurchaseRepository,
        files: AgentFileStore,
        gateway: PaymentGateway,
    ) -> None:
        self._agents = agents
        self._purchases = purchases
        self._files = files
        self._gateway = gateway

    async def checkout(self, session: UserSession, agent_id: str) -> Purchase:
        """Buy an agent for the signed-in user.

        Inserts a pending purchase, waits for the gateway's outcome and
        records it. An agent the user already owns is not charged again.

        Raises:
            AuthenticationRequiredError: If nobody is signed in.
            AgentNotFoundError: If the agent does not exist.
            PaymentDeclinedError: If the payment failed; the purchase is left ``failed``.
        """
        if not session.is_logged_in or session.user_id is None:
            raise AuthenticationRequiredError

        if await self._agents.get(agent_id) is None:
            raise AgentNotFoundError(agent_id)

        owned = await self._purchases.find_completed(agent_id, session.user_id)
        if owned is not None:
            logger.info("Agent already purchased", agent_id=agent_id, user_id=session.user_id)
            return owned

        pending = await self._purchases.create_pending(agent_id, session.user_id)
        logger.info("Purchase started", purchase_id=pending.id, agent_id=agent_id)

        try:
            event = await self._gateway.confirm(pending)
        except PaymentGatewayError as e:
            event = PaymentEvent(purchase_id=pending.id, succeeded=False, failure_reason=str(e))

        purchase = await self.apply_payment_event(event)
        if purchase.payment_status == PaymentStatus.FAILED:
            raise PaymentDeclinedError(purchase.failure_reason or "Payment declined")
        return purchase

    async def apply_payment_event(self, event: PaymentEvent) -> Purchase:
        """Settle a pending purchase from a gateway event."""
        if event.succeeded:
            return await self._purchases.transition(
                event.purchase_id,
                PaymentStatus.COMPLETED,
                payment_intent_id=event.payment_intent_id,
            )
        logger.warning(
            "Payment failed",
            purchase_id=event.purchase_id,
            reason=event.failure_reason,
        )
        return await self._purchases.transition(
            event.purchase_id,
            PaymentStatus.FAILED,
            failure_reason=event.failure_reason or "Payment declined",
        )

    async def download(self, session: UserSession, agent_id: str) -> tuple[str, bytes]:
        """Return ``(filename, content)`` of an agent the caller has paid for.

        Storage is not touched unless a completed purchase exists.

        Raises:
            AuthenticationRequiredError: If nobody is signed in.
            PurchaseRequiredError: If there is no completed purchase.
            AgentFileMissingError: If the agent or its file reference is missing.
            AgentDownloadError: If storage cannot return the file.
        """
        if not session.is_logged_in or session.user_id is None:
            raise AuthenticationRequiredError

        purchase = await self._purchases.find_completed(agent_id, session.user_id)
        if purchase is None:
            logger.info("Download denied", agent_id=agent_id, user_id=session.user_id)
            raise PurchaseRequiredError

        try:
            agent = await self._agents.get(agent_id)
        except BackendError as e:
            logger.warning("Agent lookup failed", agent_id=agent_id, error=e.message)
            raise AgentFileMissingError from e
        if agent is None or not agent.json_file_url:
            raise AgentFileMissingError

        content = await self._files.download_json_file(agent.json_file_url)
        return download_filename(agent.json_file_url), content
