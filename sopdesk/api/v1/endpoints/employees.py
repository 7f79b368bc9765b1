"""Employee API: admin-managed employees plus /me for employees."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sopdesk.api.v1.dependencies import AdminDep, EmployeeDep, get_employee_service
from sopdesk.application.use_cases import EmployeeService
from sopdesk.core.limiter import limit_writes
from sopdesk.schemas.employee import (
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeUpdate,
)

router = APIRouter()

EmployeeServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]


@router.post("", response_model=EmployeeResponse, status_code=201)
@limit_writes
async def create_employee(
    request: Request,
    body: EmployeeCreateRequest,
    caller: AdminDep,
    employee_svc: EmployeeServiceDep,
):
    created = await employee_svc.create_employee(
        caller,
        name=body.name,
        email=str(body.email),
        department=body.department,
        role=body.role,
        status=body.status,
        subject_id=body.subject_id,
        password=body.password,
    )
    return EmployeeResponse.model_validate(created)


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(caller: AdminDep, employee_svc: EmployeeServiceDep):
    """List the tenant's employees, newest first."""
    employees = await employee_svc.list_employees(caller)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.get("/me", response_model=EmployeeResponse)
async def get_my_employee_record(caller: EmployeeDep, employee_svc: EmployeeServiceDep):
    return EmployeeResponse.model_validate(await employee_svc.get_me(caller))


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: str, caller: AdminDep, employee_svc: EmployeeServiceDep):
    return EmployeeResponse.model_validate(await employee_svc.get_employee(caller, employee_id))


@router.put("/{employee_id}", response_model=EmployeeResponse)
@limit_writes
async def update_employee(
    request: Request,
    employee_id: str,
    body: EmployeeUpdate,
    caller: AdminDep,
    employee_svc: EmployeeServiceDep,
):
    """Partial update; only fields present in the body change."""
    patch = body.model_dump(exclude_unset=True)
    if "email" in patch and patch["email"] is not None:
        patch["email"] = str(patch["email"])
    updated = await employee_svc.update_employee(caller, employee_id, patch)
    return EmployeeResponse.model_validate(updated)


@router.delete("/{employee_id}", status_code=204)
@limit_writes
async def delete_employee(
    request: Request,
    employee_id: str,
    caller: AdminDep,
    employee_svc: EmployeeServiceDep,
) -> None:
    await employee_svc.delete_employee(caller, employee_id)
