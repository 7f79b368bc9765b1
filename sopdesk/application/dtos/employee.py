"""DTOs for employee use cases."""

from dataclasses import dataclass
from datetime import datetime

from sopdesk.domain.enums import EmployeeRole, EmployeeStatus


@dataclass(frozen=True)
class EmployeeCreate:
    """Validated input for creating an employee (owner stamped by the service)."""

    subject_id: str
    name: str
    email: str
    department: str
    role: EmployeeRole = EmployeeRole.STAFF
    status: EmployeeStatus = EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class EmployeeResult:
    """Employee read-model. id equals subject_id (document keyed by subject)."""

    id: str
    owner_id: str
    subject_id: str
    name: str
    email: str
    department: str
    role: EmployeeRole
    status: EmployeeStatus
    created_at: datetime | None
    updated_at: datetime | None
