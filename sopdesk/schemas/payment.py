"""Payment and subscription schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateOrderRequest(BaseModel):
    plan_id: str | None = Field(default=None, max_length=64)
    amount: float = Field(..., gt=0)


class CreateOrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: str
    payment_link: str | None = None
    payment_session_id: str | None = None


class WebhookAck(BaseModel):
    status: str = "ok"


class SubscriptionStatusResponse(BaseModel):
    """active is False without a subscription; plan_id and expires are then omitted."""

    active: bool
    plan_id: str | None = None
    expires: datetime | None = None
