"""Dashboard statistics for an admin's tenant."""

from __future__ import annotations

import asyncio

from sopdesk.application.dtos.stats import StatsResult
from sopdesk.application.interfaces.repositories import (
    IEmployeeRepository,
    IProgressRepository,
    ISopRepository,
    ITrainingRepository,
)
from sopdesk.domain.caller import UserCaller
from sopdesk.domain.enums import TrainingStatus


class StatsService:
    """Counts are computed server-side on every request; nothing is cached."""

    def __init__(
        self,
        employee_repo: IEmployeeRepository,
        sop_repo: ISopRepository,
        training_repo: ITrainingRepository,
        progress_repo: IProgressRepository,
    ) -> None:
        self.employee_repo = employee_repo
        self.sop_repo = sop_repo
        self.training_repo = training_repo
        self.progress_repo = progress_repo

    async def get_stats(self, caller: UserCaller) -> StatsResult:
        owner_id = caller.owner_id
        employees, sops, active, completed, done = await asyncio.gather(
            self.employee_repo.count_by_owner(owner_id),
            self.sop_repo.count_by_owner(owner_id),
            self.training_repo.count_by_owner_and_status(owner_id, TrainingStatus.ACTIVE),
            self.training_repo.count_by_owner_and_status(owner_id, TrainingStatus.COMPLETED),
            self.progress_repo.count_completed(owner_id),
        )
        return StatsResult(
            employees=employees,
            active_trainings=active,
            completed_trainings=completed,
            pending_sops=max(0, sops - done),
        )
