"""SOP completion progress schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sop_id: str
    employee_id: str
    completed: bool = False
    completed_at: datetime | None = None
    certificate_url: str | None = None
