"""Employee API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from sopdesk.domain.enums import EmployeeRole, EmployeeStatus


class EmployeeCreateRequest(BaseModel):
    """Request body for creating an employee.

    Either subject_id (an existing sign-in identity) or password (when the
    server manages identities) must be supplied.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., max_length=200)
    email: EmailStr
    department: str = Field(..., max_length=200)
    role: EmployeeRole = EmployeeRole.STAFF
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    subject_id: str | None = Field(default=None, max_length=128)
    password: str | None = Field(default=None, min_length=6, max_length=128)


class EmployeeUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    email: EmailStr | None = None
    department: str | None = Field(default=None, max_length=200)
    role: EmployeeRole | None = None
    status: EmployeeStatus | None = None


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    subject_id: str
    name: str
    email: str
    department: str
    role: EmployeeRole
    status: EmployeeStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
