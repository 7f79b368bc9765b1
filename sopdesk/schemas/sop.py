"""SOP API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SopCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., max_length=300)
    department: str = Field(..., max_length=200)
    content: str
    assigned_to: list[str] = Field(default_factory=list)


class SopUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=300)
    department: str | None = Field(default=None, max_length=200)
    content: str | None = None
    assigned_to: list[str] | None = None


class SopResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    title: str
    department: str
    content: str
    assigned_to: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None
