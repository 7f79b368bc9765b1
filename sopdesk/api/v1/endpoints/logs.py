"""System log API (admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from sopdesk.api.v1.dependencies import AdminDep, get_system_log_service
from sopdesk.application.use_cases import SystemLogService
from sopdesk.schemas.system_log import SystemLogResponse

router = APIRouter()


@router.get("", response_model=list[SystemLogResponse])
async def list_logs(
    caller: AdminDep,
    log_svc: Annotated[SystemLogService, Depends(get_system_log_service)],
    limit: Annotated[int | None, Query(ge=1, description="Max entries (capped server-side)")] = None,
):
    """Most recent entries first."""
    entries = await log_svc.list_recent(caller, limit)
    return [SystemLogResponse.model_validate(e) for e in entries]
