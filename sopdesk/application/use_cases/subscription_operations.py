"""Subscription purchase and status.

Orders are created at the payment gateway; the gateway's webhook activates
the subscription on a successful payment.
"""

from __future__ import annotations

import logging
from typing import Any

from sopdesk.application.dtos.subscription import PaymentOrder, SubscriptionResult
from sopdesk.application.interfaces.repositories import ISubscriptionRepository
from sopdesk.application.interfaces.services import IEventPublisher, IPaymentGateway
from sopdesk.domain.caller import Caller
from sopdesk.domain.enums import SubscriptionStatus
from sopdesk.domain.exceptions import ServiceUnavailableException, ValidationException
from sopdesk.shared.utils.datetime import add_months, ensure_utc, utc_now
from sopdesk.shared.utils.generators import generate_order_id

logger = logging.getLogger(__name__)

PAYMENT_SUCCESS = "SUCCESS"
SUBSCRIPTION_MONTHS = 1


class SubscriptionService:
    def __init__(
        self,
        subscription_repo: ISubscriptionRepository,
        payments: IPaymentGateway | None = None,
        events: IEventPublisher | None = None,
        plan_id: str = "pro",
    ) -> None:
        self.subscription_repo = subscription_repo
        self.payments = payments
        self.events = events
        self.plan_id = plan_id

    async def create_order(self, caller: Caller, amount: float) -> PaymentOrder:
        """Create a gateway order for the caller. Raises ServiceUnavailableException when unconfigured."""
        if self.payments is None:
            raise ServiceUnavailableException("payments")
        if amount is None or amount <= 0:
            raise ValidationException("amount must be positive", field="amount")
        order_id = generate_order_id()
        order = await self.payments.create_order(
            order_id=order_id,
            amount=amount,
            customer_id=caller.subject_id,
            customer_email=caller.email,
        )
        logger.info("Payment order created: subject_id=%s order_id=%s", caller.subject_id, order.order_id)
        return order

    async def handle_webhook(self, payload: dict[str, Any]) -> SubscriptionResult | None:
        """Activate the customer's subscription on a successful payment; ignore other statuses."""
        status = payload.get("payment_status")
        if status != PAYMENT_SUCCESS:
            logger.info("Payment webhook ignored: order_id=%s status=%s", payload.get("order_id"), status)
            return None
        customer = payload.get("customer_details") or {}
        user_id = customer.get("customer_id") if isinstance(customer, dict) else None
        if not user_id:
            raise ValidationException("customer_details.customer_id is required", field="customer_details")

        now = utc_now()
        subscription = await self.subscription_repo.upsert(
            SubscriptionResult(
                user_id=str(user_id),
                plan_id=self.plan_id,
                status=SubscriptionStatus.ACTIVE,
                start_date=now,
                end_date=add_months(now, SUBSCRIPTION_MONTHS),
                order_reference=payload.get("order_id"),
            )
        )
        logger.info("Subscription activated: user_id=%s order_id=%s", user_id, payload.get("order_id"))
        if self.events:
            await self.events.publish(
                subscription.user_id,
                "subscription:activated",
                {"plan_id": subscription.plan_id, "order_id": subscription.order_reference},
            )
        return subscription

    async def get_status(self, caller: Caller) -> dict[str, Any]:
        """Return {active: False} without a subscription, else {active, plan_id, expires}."""
        sub = await self.subscription_repo.get_by_user(caller.subject_id)
        if sub is None:
            return {"active": False}
        end = ensure_utc(sub.end_date)
        active = sub.status == SubscriptionStatus.ACTIVE and utc_now() <= end
        return {"active": active, "plan_id": sub.plan_id, "expires": end}
