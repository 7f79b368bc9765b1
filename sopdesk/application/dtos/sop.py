"""DTOs for SOP use cases."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SopCreate:
    """Validated input for creating a SOP."""

    title: str
    department: str
    content: str
    assigned_to: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SopResult:
    """SOP read-model. assigned_to holds employee ids of the same owner."""

    id: str
    owner_id: str
    title: str
    department: str
    content: str
    assigned_to: list[str]
    created_at: datetime | None
    updated_at: datetime | None
