"""Health and keep-alive schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from sopdesk.shared.utils.datetime import utc_now


class HealthResponse(BaseModel):
    status: str = "ok"
    time: datetime = Field(default_factory=utc_now)


class PingResponse(BaseModel):
    status: str = "active"
    time: datetime = Field(default_factory=utc_now)
