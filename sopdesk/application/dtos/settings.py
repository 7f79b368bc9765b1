"""DTOs for per-tenant system settings."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class SettingsResult:
    """System settings read-model: nested configuration groups keyed by group name."""

    owner_id: str
    groups: dict[str, dict[str, Any]]
    updated_at: datetime | None
