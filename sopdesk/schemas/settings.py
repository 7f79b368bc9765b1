"""System settings schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class SettingsUpdateRequest(BaseModel):
    """Per-group partial update: only the supplied keys of each group change."""

    model_config = ConfigDict(extra="forbid")

    websocket: dict[str, Any] | None = None
    notifications: dict[str, Any] | None = None
    workflows: dict[str, Any] | None = None
    employees: dict[str, Any] | None = None


class SettingsResponse(BaseModel):
    owner_id: str
    websocket: dict[str, Any]
    notifications: dict[str, Any]
    workflows: dict[str, Any]
    employees: dict[str, Any]
    updated_at: datetime | None = None
