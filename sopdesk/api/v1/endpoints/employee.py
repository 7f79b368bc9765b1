"""Employee self-service API: assigned SOPs, SOP progress and visible trainings."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sopdesk.api.v1.dependencies import (
    EmployeeDep,
    get_sop_completion_service,
    get_sop_service,
    get_training_service,
)
from sopdesk.application.use_cases import SopCompletionService, SopService, TrainingService
from sopdesk.core.limiter import limit_writes
from sopdesk.schemas.progress import ProgressResponse
from sopdesk.schemas.sop import SopResponse
from sopdesk.schemas.training import TrainingResponse

router = APIRouter()

CompletionServiceDep = Annotated[SopCompletionService, Depends(get_sop_completion_service)]


@router.get("/sops", response_model=list[SopResponse])
async def list_my_sops(
    caller: EmployeeDep,
    sop_svc: Annotated[SopService, Depends(get_sop_service)],
):
    return [SopResponse.model_validate(s) for s in await sop_svc.list_sops(caller)]


@router.post("/sops/{sop_id}/complete", response_model=ProgressResponse)
@limit_writes
async def complete_my_sop(
    request: Request,
    sop_id: str,
    caller: EmployeeDep,
    completion_svc: CompletionServiceDep,
):
    progress = await completion_svc.complete(caller, sop_id)
    return ProgressResponse.model_validate(progress)


@router.get("/sops/{sop_id}/progress", response_model=ProgressResponse)
async def get_my_sop_progress(sop_id: str, caller: EmployeeDep, completion_svc: CompletionServiceDep):
    """Progress on an assigned SOP; not yet started reads as completed=false."""
    progress = await completion_svc.get_progress(caller, sop_id)
    if progress is None:
        return ProgressResponse(sop_id=sop_id, employee_id=caller.employee_id)
    return ProgressResponse.model_validate(progress)


@router.get("/training", response_model=list[TrainingResponse])
async def list_my_trainings(
    caller: EmployeeDep,
    training_svc: Annotated[TrainingService, Depends(get_training_service)],
):
    """Public trainings plus those assigned to the caller."""
    return [TrainingResponse.model_validate(t) for t in await training_svc.list_trainings(caller)]
