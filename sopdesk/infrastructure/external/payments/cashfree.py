"""Cashfree payment gateway client (order creation + webhook signature check)."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging

import httpx

from sopdesk.application.dtos.subscription import PaymentOrder
from sopdesk.domain.exceptions import UpstreamFailureException

logger = logging.getLogger(__name__)

ORDER_CURRENCY = "INR"


class CashfreeGateway:
    """Creates orders through the Cashfree PG REST API (implements IPaymentGateway)."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        app_id: str,
        secret: str,
        *,
        base_url: str = "https://sandbox.cashfree.com/pg",
        api_version: str = "2023-08-01",
        timeout_seconds: float = 15.0,
    ) -> None:
        self._http = http_client
        self._app_id = app_id
        self._secret = secret
        self._base_url = base_url.rstrip("/")
        self._api_version = api_version
        self._timeout = timeout_seconds

    async def create_order(
        self,
        order_id: str,
        amount: float,
        customer_id: str,
        customer_email: str,
    ) -> PaymentOrder:
        payload = {
            "order_id": order_id,
            "order_amount": amount,
            "order_currency": ORDER_CURRENCY,
            "customer_details": {
                "customer_id": customer_id,
                "customer_email": customer_email,
            },
        }
        headers = {
            "x-client-id": self._app_id,
            "x-client-secret": self._secret,
            "x-api-version": self._api_version,
            "Content-Type": "application/json",
        }
        try:
            resp = await self._http.post(
                f"{self._base_url}/orders",
                json=payload,
                headers=headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Cashfree order request failed: order_id=%s error=%s", order_id, e)
            raise UpstreamFailureException("payments", "gateway unreachable") from e
        if resp.status_code >= 400:
            logger.error(
                "Cashfree order rejected: order_id=%s status=%s", order_id, resp.status_code
            )
            raise UpstreamFailureException("payments", f"gateway returned {resp.status_code}")
        data = resp.json()
        return PaymentOrder(
            order_id=data.get("order_id", order_id),
            payment_link=data.get("payment_link"),
            payment_session_id=data.get("payment_session_id"),
        )


def verify_webhook_signature(
    raw_body: bytes,
    timestamp: str | None,
    signature: str | None,
    secret: str,
) -> bool:
    """Return True if signature == base64(HMAC-SHA256(secret, timestamp + raw body))."""
    if not signature or not timestamp:
        return False
    digest = hmac.new(
        secret.encode(), timestamp.encode() + raw_body, hashlib.sha256
    ).digest()
    expected = base64.b64encode(digest).decode()
    return hmac.compare_digest(signature.strip(), expected)
