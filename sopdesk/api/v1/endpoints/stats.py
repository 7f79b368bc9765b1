"""Dashboard statistics (admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sopdesk.api.v1.dependencies import AdminDep, get_stats_service
from sopdesk.application.use_cases import StatsService
from sopdesk.schemas.stats import StatsResponse

router = APIRouter()


@router.get("", response_model=StatsResponse)
async def get_stats(
    caller: AdminDep,
    stats_svc: Annotated[StatsService, Depends(get_stats_service)],
):
    return StatsResponse.model_validate(await stats_svc.get_stats(caller))
