"""DTOs for subscription use cases."""

from dataclasses import dataclass
from datetime import datetime

from sopdesk.domain.enums import SubscriptionStatus


@dataclass(frozen=True)
class SubscriptionResult:
    """Subscription read-model (one per user)."""

    user_id: str
    plan_id: str
    status: SubscriptionStatus
    start_date: datetime
    end_date: datetime
    order_reference: str | None


@dataclass(frozen=True)
class PaymentOrder:
    """Order created at the payment gateway."""

    order_id: str
    payment_link: str | None
    payment_session_id: str | None = None
