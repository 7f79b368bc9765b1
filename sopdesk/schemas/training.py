"""Training video API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from sopdesk.domain.enums import TrainingStatus


class TrainingCreateRequest(BaseModel):
    """Empty assigned_employees publishes the training to every employee."""

    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., max_length=300)
    media_url: str = Field(..., max_length=2048)
    description: str | None = Field(default=None, max_length=5000)
    thumbnail_url: str | None = Field(default=None, max_length=2048)
    assigned_employees: list[str] = Field(default_factory=list)


class TrainingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    title: str
    description: str
    media_url: str
    thumbnail_url: str | None = None
    assigned_employees: list[str]
    status: TrainingStatus
    completed_by: list[str]
    created_at: datetime | None = None
