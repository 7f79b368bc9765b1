"""DTOs for training video use cases."""

from dataclasses import dataclass, field
from datetime import datetime

from sopdesk.domain.enums import TrainingStatus


@dataclass(frozen=True)
class TrainingCreate:
    """Validated input for creating a training video."""

    title: str
    media_url: str
    description: str = ""
    thumbnail_url: str | None = None
    assigned_employees: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TrainingResult:
    """Training read-model.

    Empty assigned_employees means the training is public to every employee
    of the owner.
    """

    id: str
    owner_id: str
    title: str
    description: str
    media_url: str
    thumbnail_url: str | None
    assigned_employees: list[str]
    status: TrainingStatus
    completed_by: list[str]
    created_at: datetime | None

    @property
    def is_public(self) -> bool:
        return not self.assigned_employees

    def is_visible_to(self, subject_id: str) -> bool:
        return self.is_public or subject_id in self.assigned_employees
