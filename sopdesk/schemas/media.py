"""Media upload signing schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UploadSignatureRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    public_id: str | None = Field(default=None, max_length=255, pattern=r"^[A-Za-z0-9_\-/.]+$")


class UploadSignatureResponse(BaseModel):
    """Presigned POST: the client sends `fields` plus the file to `url`."""

    url: str
    fields: dict[str, str]
    key: str
    expires_in: int
