"""System log schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from sopdesk.domain.enums import LogType


class SystemLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    message: str
    type: LogType
    created_at: datetime | None = None
