"""Purchase table access."""

import structlog

from agentmart.exceptions import InvalidPurchaseTransitionError
from agentmart.models.purchase import PaymentStatus, Purchase, check_transition
from agentmart.repositories.base import BaseRepository

logger = structlog.get_logger()


class PurchaseRepository(BaseRepository[Purchase]):
    table_name = "purchases"
    model = Purchase

    async def create_pending(self, agent_id: str, user_id: str) -> Purchase:
        rows = await self.table.insert(
            {
                "agent_id": agent_id,
                "user_id": user_id,
                "payment_status": PaymentStatus.PENDING.value,
            }
        )
        return self._created(rows)

    async def find_completed(self, agent_id: str, user_id: str) -> Purchase | None:
        """Return a completed purchase of the agent by the user, if any."""
        row = await (
            self.table.select()
            .eq("agent_id", agent_id)
            .eq("user_id", user_id)
            .eq("payment_status", PaymentStatus.COMPLETED.value)
            .maybe_single()
        )
        return self._one(row) if row is not None else None

    async def list_for_user(self, user_id: str) -> list[Purchase]:
        rows = (
            await self.table.select()
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return self._many(rows)

    async def transition(
        self,
        purchase_id: str,
        target: PaymentStatus,
        payment_intent_id: str | None = None,
        failure_reason: str | None = None,
    ) -> Purchase:
        """Move a pending purchase to ``target``.

        The update only matches rows still in ``pending``, so a purchase that
        was already settled is never overwritten.

        Raises:
            InvalidPurchaseTransitionError: If the purchase is not pending.
        """
        check_transition(PaymentStatus.PENDING, target)

        values: dict[str, str] = {"payment_status": target.value}
        if payment_intent_id:
            values["payment_intent_id"] = payment_intent_id
        if failure_reason:
            values["failure_reason"] = failure_reason

        rows = (
            await self.table.update(values)
            .eq("id", purchase_id)
            .eq("payment_status", PaymentStatus.PENDING.value)
            .execute()
        )
        if not rows:
            current = await self.get(purchase_id)
            current_status = current.payment_status.value if current else "none"
            logger.warning(
                "Rejected purchase transition",
                purchase_id=purchase_id,
                current=current_status,
                target=target.value,
            )
            raise InvalidPurchaseTransitionError(current_status, target.value)

        logger.info("Purchase transitioned", purchase_id=purchase_id, status=target.value)
        return self._one(rows[0])
