"""Stats schemas."""

from pydantic import BaseModel, ConfigDict


class StatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employees: int
    active_trainings: int
    completed_trainings: int
    pending_sops: int
