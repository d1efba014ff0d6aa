"""Payment confirmation.

There is no real payment provider. ``SimulatedPaymentGateway`` waits a fixed
delay and then reports an outcome, which the purchase service applies as a
state transition on the purchase record.
"""

import asyncio
import uuid
from dataclasses import dataclass
from typing import Protocol

import structlog

from agentmart.models.purchase import Purchase

logger = structlog.get_logger()


@dataclass(frozen=True)
class PaymentEvent:
    """Outcome of a payment attempt for one purchase."""

    purchase_id: str
    succeeded: bool
    payment_intent_id: str | None = None
    failure_reason: str | None = None


class PaymentGateway(Protocol):
    async def confirm(self, purchase: Purchase) -> PaymentEvent:
        """Wait for the payment behind ``purchase`` to settle."""
        ...


class SimulatedPaymentGateway:
    """Gateway that settles every payment after a fixed delay."""

    def __init__(
        self,
        delay_seconds: float = 2.0,
        succeed: bool = True,
        failure_reason: str = "Payment declined",
    ) -> None:
        self.delay_seconds = delay_seconds
        self.succeed = succeed
        self.failure_reason = failure_reason

    async def confirm(self, purchase: Purchase) -> PaymentEvent:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if not self.succeed:
            logger.info("Simulated payment declined", purchase_id=purchase.id)
            return PaymentEvent(
                purchase_id=purchase.id,
                succeeded=False,
                failure_reason=self.failure_reason,
            )

        intent_id = f"sim_{uuid.uuid4().hex}"
        logger.info("Simulated payment confirmed", purchase_id=purchase.id, intent_id=intent_id)
        return PaymentEvent(purchase_id=purchase.id, succeeded=True, payment_intent_id=intent_id)
