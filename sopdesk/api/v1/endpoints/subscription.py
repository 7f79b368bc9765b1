"""Subscription status API."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sopdesk.api.v1.dependencies import CallerDep, get_subscription_service
from sopdesk.application.use_cases import SubscriptionService
from sopdesk.schemas.payment import SubscriptionStatusResponse

router = APIRouter()


@router.get(
    "/status",
    response_model=SubscriptionStatusResponse,
    response_model_exclude_none=True,
)
async def get_subscription_status(
    caller: CallerDep,
    subscription_svc: Annotated[SubscriptionService, Depends(get_subscription_service)],
):
    return SubscriptionStatusResponse(**await subscription_svc.get_status(caller))
