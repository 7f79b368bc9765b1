"""User and caller profile schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from sopdesk.domain.enums import UserRole
from sopdesk.schemas.employee import EmployeeResponse


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: UserRole
    created_at: datetime | None = None


class RegisterAdminResponse(BaseModel):
    message: str = "Registered as admin"
    user: UserResponse


class MeResponse(BaseModel):
    """Profile of the caller.

    kind is "employee" for callers bound to an employee record (employee is
    then set) and "user" otherwise (user is then set).
    """

    kind: Literal["user", "employee"]
    subject_id: str
    email: str
    owner_id: str
    role: str
    user: UserResponse | None = None
    employee: EmployeeResponse | None = None
