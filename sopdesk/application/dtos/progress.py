"""DTOs for per-employee SOP completion progress."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProgressResult:
    """EmployeeSOPProgress read-model.

    update_time is the store's last-write marker, used as the precondition
    when claiming completion.
    """

    id: str
    owner_id: str
    employee_id: str
    sop_id: str
    completed: bool
    completed_at: datetime | None
    certificate_url: str | None
    created_at: datetime | None
    update_time: str | None = None
