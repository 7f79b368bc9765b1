"""DTOs for the system log (audit trail)."""

from dataclasses import dataclass
from datetime import datetime

from sopdesk.domain.enums import LogType


@dataclass(frozen=True)
class SystemLogResult:
    id: str
    owner_id: str
    message: str
    type: LogType
    created_at: datetime | None
