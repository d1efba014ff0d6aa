"""Purchase models and the payment status state machine."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict

from agentmart.exceptions import InvalidPurchaseTransitionError


class PaymentStatus(str, Enum):
    """Payment lifecycle of a purchase."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


# completed and failed are terminal
ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.COMPLETED, PaymentStatus.FAILED}),
    PaymentStatus.COMPLETED: frozenset(),
    PaymentStatus.FAILED: frozenset(),
}


def check_transition(current: PaymentStatus, target: PaymentStatus) -> None:
    """Raise InvalidPurchaseTransitionError unless ``current -> target`` is allowed."""
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidPurchaseTransitionError(current.value, target.value)


class Purchase(BaseModel):
    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True)

    id: str
    agent_id: str
    user_id: str
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_intent_id: str | None = None
    failure_reason: str | None = None
    created_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED
