"""Training video API and completion transitions."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sopdesk.api.v1.dependencies import AdminDep, CallerDep, EmployeeDep, get_training_service
from sopdesk.application.use_cases import TrainingService
from sopdesk.core.limiter import limit_writes
from sopdesk.schemas.training import TrainingCreateRequest, TrainingResponse

router = APIRouter()

TrainingServiceDep = Annotated[TrainingService, Depends(get_training_service)]


@router.post("", response_model=TrainingResponse, status_code=201)
@limit_writes
async def create_training(
    request: Request,
    body: TrainingCreateRequest,
    caller: AdminDep,
    training_svc: TrainingServiceDep,
):
    created = await training_svc.create_training(
        caller,
        title=body.title,
        media_url=body.media_url,
        description=body.description,
        thumbnail_url=body.thumbnail_url,
        assigned_employees=body.assigned_employees,
    )
    return TrainingResponse.model_validate(created)


@router.get("", response_model=list[TrainingResponse])
async def list_trainings(caller: CallerDep, training_svc: TrainingServiceDep):
    return [TrainingResponse.model_validate(t) for t in await training_svc.list_trainings(caller)]


@router.get("/{training_id}", response_model=TrainingResponse)
async def get_training(training_id: str, caller: CallerDep, training_svc: TrainingServiceDep):
    return TrainingResponse.model_validate(await training_svc.get_training(caller, training_id))


@router.delete("/{training_id}", status_code=204)
@limit_writes
async def delete_training(
    request: Request,
    training_id: str,
    caller: AdminDep,
    training_svc: TrainingServiceDep,
) -> None:
    await training_svc.delete_training(caller, training_id)


@router.post("/{training_id}/complete", response_model=TrainingResponse)
@limit_writes
async def complete_training(
    request: Request,
    training_id: str,
    caller: EmployeeDep,
    training_svc: TrainingServiceDep,
):
    """Record the calling employee's completion."""
    updated = await training_svc.complete_training(caller, training_id)
    return TrainingResponse.model_validate(updated)


@router.post("/{training_id}/mark-complete", response_model=TrainingResponse)
@limit_writes
async def mark_training_complete(
    request: Request,
    training_id: str,
    caller: AdminDep,
    training_svc: TrainingServiceDep,
):
    """Admin override: force the training to completed."""
    updated = await training_svc.mark_complete(caller, training_id)
    return TrainingResponse.model_validate(updated)
