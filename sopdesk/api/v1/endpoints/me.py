"""Current caller profile."""

from typing import Annotated

from fastapi import APIRouter, Depends

from sopdesk.api.v1.dependencies import CallerDep, CapabilitiesDep, get_employee_service
from sopdesk.application.use_cases import EmployeeService
from sopdesk.domain.caller import EmployeeCaller
from sopdesk.domain.exceptions import ResourceNotFoundException
from sopdesk.schemas.employee import EmployeeResponse
from sopdesk.schemas.user import MeResponse, UserResponse

router = APIRouter()


@router.get("", response_model=MeResponse)
async def get_me(
    caller: CallerDep,
    caps: CapabilitiesDep,
    employee_svc: Annotated[EmployeeService, Depends(get_employee_service)],
):
    """Return the caller's profile. First sight of a non-employee creates a staff user."""
    if isinstance(caller, EmployeeCaller):
        employee = await employee_svc.get_me(caller)
        return MeResponse(
            kind="employee",
            subject_id=caller.subject_id,
            email=caller.email,
            owner_id=caller.owner_id,
            role=employee.role.value,
            employee=EmployeeResponse.model_validate(employee),
        )
    user = await caps.users.get_by_id(caller.subject_id)
    if user is None:
        raise ResourceNotFoundException("user", caller.subject_id)
    return MeResponse(
        kind="user",
        subject_id=caller.subject_id,
        email=user.email,
        owner_id=caller.owner_id,
        role=user.role.value,
        user=UserResponse.model_validate(user),
    )
