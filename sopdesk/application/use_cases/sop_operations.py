"""SOP operations: create, list, recent, get, update, clear, delete."""

from __future__ import annotations

import logging
from typing import Any

from sopdesk.application.dtos.sop import SopCreate, SopResult
from sopdesk.application.interfaces.repositories import (
    IEmployeeRepository,
    IProgressRepository,
    ISopRepository,
)
from sopdesk.application.interfaces.services import IEventPublisher
from sopdesk.application.services.authorization_service import ensure_owned
from sopdesk.domain.caller import Caller, EmployeeCaller, UserCaller
from sopdesk.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)

RECENT_SOPS_LIMIT = 3


class SopService:
    """Owner-scoped SOP records. Employees read only the SOPs assigned to them."""

    def __init__(
        self,
        sop_repo: ISopRepository,
        employee_repo: IEmployeeRepository,
        progress_repo: IProgressRepository,
        events: IEventPublisher | None = None,
        recent_limit: int = RECENT_SOPS_LIMIT,
    ) -> None:
        self.sop_repo = sop_repo
        self.employee_repo = employee_repo
        self.progress_repo = progress_repo
        self.events = events
        self.recent_limit = recent_limit

    async def _publish(self, owner_id: str, event_type: str, sop: SopResult) -> None:
        if self.events:
            await self.events.publish(owner_id, event_type, {"sop_id": sop.id, "title": sop.title})

    async def _validate_assignees(self, owner_id: str, assigned_to: list[str]) -> list[str]:
        """De-duplicate assignees; each must be an employee of owner."""
        unique = list(dict.fromkeys(a for a in assigned_to if a))
        for employee_id in unique:
            employee = await self.employee_repo.get_by_id(employee_id)
            if employee is None or employee.owner_id != owner_id:
                raise ValidationException(
                    f"Unknown employee in assigned_to: {employee_id}", field="assigned_to"
                )
        return unique

    async def create_sop(
        self,
        caller: UserCaller,
        title: str | None,
        department: str | None,
        content: str | None,
        assigned_to: list[str] | None = None,
    ) -> SopResult:
        for field, value in (("title", title), ("department", department), ("content", content)):
            if value is None or not value.strip():
                raise ValidationException(f"{field} is required", field=field)
        assignees = await self._validate_assignees(caller.owner_id, assigned_to or [])
        sop = await self.sop_repo.create_sop(
            caller.owner_id,
            SopCreate(
                title=title.strip(),
                department=department.strip(),
                content=content,
                assigned_to=assignees,
            ),
        )
        logger.info("SOP created: owner_id=%s sop_id=%s", caller.owner_id, sop.id)
        await self._publish(caller.owner_id, "sop:created", sop)
        return sop

    async def list_sops(self, caller: Caller) -> list[SopResult]:
        """Admins get all SOPs of the tenant; employees get those assigned to them."""
        if isinstance(caller, EmployeeCaller):
            return await self.sop_repo.list_assigned(caller.owner_id, caller.employee_id)
        return await self.sop_repo.list_by_owner(caller.owner_id)

    async def list_recent(self, caller: UserCaller) -> list[SopResult]:
        return await self.sop_repo.list_by_owner(caller.owner_id, limit=self.recent_limit)

    async def get_sop(self, caller: Caller, sop_id: str) -> SopResult:
        sop = ensure_owned(caller, await self.sop_repo.get_by_id(sop_id), "sop", sop_id)
        if isinstance(caller, EmployeeCaller) and caller.employee_id not in sop.assigned_to:
            raise ResourceNotFoundException("sop", sop_id)
        return sop

    async def update_sop(self, caller: UserCaller, sop_id: str, patch: dict[str, Any]) -> SopResult:
        await self.get_sop(caller, sop_id)
        fields = dict(patch)
        for key in ("title", "department"):
            if key in fields and (fields[key] is None or not str(fields[key]).strip()):
                raise ValidationException(f"{key} is required", field=key)
        if "content" in fields and fields["content"] is None:
            raise ValidationException("content is required", field="content")
        if "assigned_to" in fields:
            fields["assigned_to"] = await self._validate_assignees(
                caller.owner_id, fields["assigned_to"] or []
            )
        if not fields:
            return await self.get_sop(caller, sop_id)
        updated = await self.sop_repo.update_sop(sop_id, fields)
        if updated is None:
            raise ResourceNotFoundException("sop", sop_id)
        await self._publish(caller.owner_id, "sop:updated", updated)
        return updated

    async def clear_sop(self, caller: UserCaller, sop_id: str) -> SopResult:
        """Empty the SOP's content, keeping the record and its assignments."""
        await self.get_sop(caller, sop_id)
        updated = await self.sop_repo.update_sop(sop_id, {"content": ""})
        if updated is None:
            raise ResourceNotFoundException("sop", sop_id)
        await self._publish(caller.owner_id, "sop:cleared", updated)
        return updated

    async def delete_sop(self, caller: UserCaller, sop_id: str) -> None:
        """Delete the SOP and its progress records."""
        sop = await self.get_sop(caller, sop_id)
        await self.sop_repo.delete_sop(sop_id)
        await self.progress_repo.delete_for_sop(sop_id)
        logger.info("SOP deleted: owner_id=%s sop_id=%s", caller.owner_id, sop_id)
        await self._publish(caller.owner_id, "sop:deleted", sop)
