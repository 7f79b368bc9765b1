"""System log reads for admins."""

from __future__ import annotations

from sopdesk.application.dtos.system_log import SystemLogResult
from sopdesk.application.interfaces.repositories import ISystemLogRepository
from sopdesk.domain.caller import UserCaller
from sopdesk.domain.exceptions import ValidationException


class SystemLogService:
    def __init__(
        self,
        log_repo: ISystemLogRepository,
        default_limit: int = 50,
        max_limit: int = 200,
    ) -> None:
        self.log_repo = log_repo
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def list_recent(self, caller: UserCaller, limit: int | None = None) -> list[SystemLogResult]:
        """Return the newest entries; limit defaults to default_limit and is capped at max_limit."""
        if limit is None:
            limit = self.default_limit
        if limit < 1:
            raise ValidationException("limit must be positive", field="limit")
        return await self.log_repo.list_recent(caller.owner_id, min(limit, self.max_limit))
