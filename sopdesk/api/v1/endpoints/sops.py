"""SOP API: admin CRUD, assigned reads for employees, completion."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sopdesk.api.v1.dependencies import (
    AdminDep,
    CallerDep,
    EmployeeDep,
    get_sop_completion_service,
    get_sop_service,
)
from sopdesk.application.use_cases import SopCompletionService, SopService
from sopdesk.core.limiter import limit_writes
from sopdesk.schemas.progress import ProgressResponse
from sopdesk.schemas.sop import SopCreateRequest, SopResponse, SopUpdate

router = APIRouter()

SopServiceDep = Annotated[SopService, Depends(get_sop_service)]
CompletionServiceDep = Annotated[SopCompletionService, Depends(get_sop_completion_service)]


@router.post("", response_model=SopResponse, status_code=201)
@limit_writes
async def create_sop(
    request: Request,
    body: SopCreateRequest,
    caller: AdminDep,
    sop_svc: SopServiceDep,
):
    created = await sop_svc.create_sop(
        caller,
        title=body.title,
        department=body.department,
        content=body.content,
        assigned_to=body.assigned_to,
    )
    return SopResponse.model_validate(created)


@router.get("", response_model=list[SopResponse])
async def list_sops(caller: CallerDep, sop_svc: SopServiceDep):
    """Admins: all SOPs of the tenant. Employees: SOPs assigned to them."""
    return [SopResponse.model_validate(s) for s in await sop_svc.list_sops(caller)]


@router.get("/recent", response_model=list[SopResponse])
async def list_recent_sops(caller: AdminDep, sop_svc: SopServiceDep):
    return [SopResponse.model_validate(s) for s in await sop_svc.list_recent(caller)]


@router.get("/{sop_id}", response_model=SopResponse)
async def get_sop(sop_id: str, caller: CallerDep, sop_svc: SopServiceDep):
    return SopResponse.model_validate(await sop_svc.get_sop(caller, sop_id))


@router.put("/{sop_id}", response_model=SopResponse)
@limit_writes
async def update_sop(
    request: Request,
    sop_id: str,
    body: SopUpdate,
    caller: AdminDep,
    sop_svc: SopServiceDep,
):
    updated = await sop_svc.update_sop(caller, sop_id, body.model_dump(exclude_unset=True))
    return SopResponse.model_validate(updated)


@router.put("/{sop_id}/clear", response_model=SopResponse)
@limit_writes
async def clear_sop(request: Request, sop_id: str, caller: AdminDep, sop_svc: SopServiceDep):
    """Empty the SOP's content."""
    return SopResponse.model_validate(await sop_svc.clear_sop(caller, sop_id))


@router.delete("/{sop_id}", status_code=204)
@limit_writes
async def delete_sop(request: Request, sop_id: str, caller: AdminDep, sop_svc: SopServiceDep) -> None:
    await sop_svc.delete_sop(caller, sop_id)


@router.post("/{sop_id}/complete", response_model=ProgressResponse)
@limit_writes
async def complete_sop(
    request: Request,
    sop_id: str,
    caller: EmployeeDep,
    completion_svc: CompletionServiceDep,
):
    """Mark the SOP complete for the calling employee (idempotent)."""
    progress = await completion_svc.complete(caller, sop_id)
    return ProgressResponse.model_validate(progress)
