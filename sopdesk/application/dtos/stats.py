"""DTOs for tenant stats."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StatsResult:
    """Live tenant aggregate counts."""

    employees: int
    active_trainings: int
    completed_trainings: int
    pending_sops: int
