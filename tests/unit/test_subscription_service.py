"""Tests for subscription orders, webhook activation and status."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from sopdesk.application.dtos.subscription import PaymentOrder, SubscriptionResult
from sopdesk.application.use_cases import SubscriptionService
from sopdesk.domain.caller import UserCaller
from sopdesk.domain.enums import SubscriptionStatus, UserRole
from sopdesk.domain.exceptions import ServiceUnavailableException, ValidationException
from sopdesk.shared.utils import utc_now

CALLER = UserCaller("u1", "u1@example.com", UserRole.ADMIN)


async def test_create_order_without_gateway_is_unavailable(caps) -> None:
    with pytest.raises(ServiceUnavailableException):
        await SubscriptionService(caps.subscriptions).create_order(CALLER, 499)


async def test_create_order_uses_caller_as_customer(caps) -> None:
    gateway = AsyncMock()
    gateway.create_order.return_value = PaymentOrder("TD_1", "https://pay/1")
    order = await SubscriptionService(caps.subscriptions, gateway).create_order(CALLER, 499)
    assert order.payment_link == "https://pay/1"
    kwargs = gateway.create_order.await_args.kwargs
    assert kwargs["customer_id"] == "u1"
    assert kwargs["order_id"].startswith("TD_")


async def test_create_order_rejects_non_positive_amount(caps) -> None:
    with pytest.raises(ValidationException):
        await SubscriptionService(caps.subscriptions, AsyncMock()).create_order(CALLER, 0)


async def test_status_without_subscription(caps) -> None:
    assert await SubscriptionService(caps.subscriptions).get_status(CALLER) == {"active": False}


async def test_successful_webhook_activates_for_one_month(caps) -> None:
    service = SubscriptionService(caps.subscriptions, events=caps.events)
    sub = await service.handle_webhook(
        {"order_id": "TD_1", "payment_status": "SUCCESS", "customer_details": {"customer_id": "u1"}}
    )
    assert sub.status == SubscriptionStatus.ACTIVE
    assert timedelta(days=27) < sub.end_date - sub.start_date < timedelta(days=32)

    status = await service.get_status(CALLER)
    assert status["active"] is True
    assert status["plan_id"] == "pro"


async def test_failed_payment_is_ignored(caps) -> None:
    service = SubscriptionService(caps.subscriptions)
    assert await service.handle_webhook({"payment_status": "FAILED"}) is None
    assert await service.get_status(CALLER) == {"active": False}


async def test_webhook_without_customer_is_rejected(caps) -> None:
    with pytest.raises(ValidationException):
        await SubscriptionService(caps.subscriptions).handle_webhook({"payment_status": "SUCCESS"})


async def test_expired_subscription_reports_inactive(caps) -> None:
    past = utc_now() - timedelta(days=60)
    await caps.subscriptions.upsert(
        SubscriptionResult("u1", "pro", SubscriptionStatus.ACTIVE, past, past + timedelta(days=30), "TD_0")
    )
    status = await SubscriptionService(caps.subscriptions).get_status(CALLER)
    assert status["active"] is False
