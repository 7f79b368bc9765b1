"""DTOs for user use cases."""

from dataclasses import dataclass
from datetime import datetime

from sopdesk.domain.enums import UserRole


@dataclass(frozen=True)
class UserResult:
    """User read-model. id is the identity-provider subject id."""

    id: str
    email: str
    role: UserRole
    created_at: datetime | None
