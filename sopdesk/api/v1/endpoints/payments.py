"""Payments API: gateway order creation and the gateway's result webhook."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sopdesk.api.v1.dependencies import CallerDep, SettingsDep, get_subscription_service
from sopdesk.application.use_cases import SubscriptionService
from sopdesk.core.limiter import limit_payments
from sopdesk.domain.exceptions import InvalidCredentialException, ValidationException
from sopdesk.infrastructure.external.payments import verify_webhook_signature
from sopdesk.schemas.payment import CreateOrderRequest, CreateOrderResponse, WebhookAck

logger = logging.getLogger(__name__)

router = APIRouter()

SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]


@router.post("/create-order", response_model=CreateOrderResponse)
@limit_payments
async def create_order(
    request: Request,
    body: CreateOrderRequest,
    caller: CallerDep,
    subscription_svc: SubscriptionServiceDep,
):
    """Create a payment order for the caller and return the payment link."""
    order = await subscription_svc.create_order(caller, body.amount)
    return CreateOrderResponse.model_validate(order)


@router.post("/webhook", response_model=WebhookAck)
async def payment_webhook(
    request: Request,
    settings: SettingsDep,
    subscription_svc: SubscriptionServiceDep,
):
    """Gateway callback. When a webhook secret is configured the signature must match.

    x-webhook-signature: base64(hmac_sha256(secret, x-webhook-timestamp + raw body)).
    """
    body = await request.body()
    secret = settings.cashfree_webhook_secret
    if secret is not None and secret.get_secret_value():
        if not verify_webhook_signature(
            body,
            request.headers.get("x-webhook-timestamp"),
            request.headers.get("x-webhook-signature"),
            secret.get_secret_value(),
        ):
            logger.warning("Payment webhook rejected: invalid signature")
            raise InvalidCredentialException("Invalid webhook signature")
    try:
        payload = json.loads(body or b"{}")
    except ValueError:
        raise ValidationException("Webhook body is not valid JSON") from None
    if not isinstance(payload, dict):
        raise ValidationException("Webhook body must be a JSON object")
    # Newer gateway API versions nest the order and payment objects under "data".
    if isinstance(payload.get("data"), dict):
        data = payload["data"]
        payload = {
            "order_id": (data.get("order") or {}).get("order_id"),
            "payment_status": (data.get("payment") or {}).get("payment_status"),
            "customer_details": data.get("customer_details") or {},
        }
    await subscription_svc.handle_webhook(payload)
    return WebhookAck()
