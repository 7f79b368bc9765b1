"""Training video operations and the training completion state machine.

A training starts ACTIVE and only ever moves to COMPLETED:
- a public training (no assignees) completes on its first completion;
- an assigned training completes once every assignee is in completed_by;
- an admin may force completion.
"""

from __future__ import annotations

import logging

from sopdesk.application.dtos.training import TrainingCreate, TrainingResult
from sopdesk.application.interfaces.repositories import (
    IEmployeeRepository,
    ITrainingRepository,
)
from sopdesk.application.interfaces.services import IEventPublisher
from sopdesk.application.services.authorization_service import ensure_owned
from sopdesk.domain.caller import Caller, EmployeeCaller, UserCaller
from sopdesk.domain.enums import TrainingStatus
from sopdesk.domain.exceptions import ResourceNotFoundException, ValidationException

logger = logging.getLogger(__name__)


def is_fully_completed(training: TrainingResult) -> bool:
    """True when the completion condition of the training holds."""
    if training.is_public:
        return bool(training.completed_by)
    return set(training.assigned_employees) <= set(training.completed_by)


class TrainingService:
    """Owner-scoped training videos."""

    def __init__(
        self,
        training_repo: ITrainingRepository,
        employee_repo: IEmployeeRepository,
        events: IEventPublisher | None = None,
    ) -> None:
        self.training_repo = training_repo
        self.employee_repo = employee_repo
        self.events = events

    async def _publish(self, owner_id: str, event_type: str, training: TrainingResult) -> None:
        if self.events:
            await self.events.publish(
                owner_id, event_type, {"training_id": training.id, "title": training.title}
            )

    async def create_training(
        self,
        caller: UserCaller,
        title: str | None,
        media_url: str | None,
        description: str | None = None,
        thumbnail_url: str | None = None,
        assigned_employees: list[str] | None = None,
    ) -> TrainingResult:
        for field, value in (("title", title), ("media_url", media_url)):
            if value is None or not value.strip():
                raise ValidationException(f"{field} is required", field=field)
        assignees = list(dict.fromkeys(a for a in (assigned_employees or []) if a))
        for employee_id in assignees:
            employee = await self.employee_repo.get_by_id(employee_id)
            if employee is None or employee.owner_id != caller.owner_id:
                raise ValidationException(
                    f"Unknown employee in assigned_employees: {employee_id}",
                    field="assigned_employees",
                )
        training = await self.training_repo.create_training(
            caller.owner_id,
            TrainingCreate(
                title=title.strip(),
                media_url=media_url.strip(),
                description=description or "",
                thumbnail_url=thumbnail_url,
                assigned_employees=assignees,
            ),
        )
        logger.info("Training created: owner_id=%s training_id=%s", caller.owner_id, training.id)
        await self._publish(caller.owner_id, "training:created", training)
        return training

    async def list_trainings(self, caller: Caller) -> list[TrainingResult]:
        """Admins see every training; employees see public and assigned ones."""
        trainings = await self.training_repo.list_by_owner(caller.owner_id)
        if isinstance(caller, EmployeeCaller):
            return [t for t in trainings if t.is_visible_to(caller.employee_id)]
        return trainings

    async def get_training(self, caller: Caller, training_id: str) -> TrainingResult:
        training = ensure_owned(
            caller, await self.training_repo.get_by_id(training_id), "training", training_id
        )
        if isinstance(caller, EmployeeCaller) and not training.is_visible_to(caller.employee_id):
            raise ResourceNotFoundException("training", training_id)
        return training

    async def delete_training(self, caller: UserCaller, training_id: str) -> None:
        training = await self.get_training(caller, training_id)
        await self.training_repo.delete_training(training_id)
        await self._publish(caller.owner_id, "training:deleted", training)

    async def complete_training(self, caller: EmployeeCaller, training_id: str) -> TrainingResult:
        """Record the employee's completion; advance the training when the condition holds.

        Repeated completion by the same employee is a no-op on completed_by.
        """
        await self.get_training(caller, training_id)
        updated = await self.training_repo.add_completion(training_id, caller.employee_id)
        if updated is None:
            raise ResourceNotFoundException("training", training_id)
        if updated.status == TrainingStatus.ACTIVE and is_fully_completed(updated):
            updated = await self._set_completed(caller.owner_id, updated)
        return updated

    async def mark_complete(self, caller: UserCaller, training_id: str) -> TrainingResult:
        """Admin override: force the training to COMPLETED."""
        training = await self.get_training(caller, training_id)
        if training.status == TrainingStatus.COMPLETED:
            return training
        return await self._set_completed(caller.owner_id, training)

    async def _set_completed(self, owner_id: str, training: TrainingResult) -> TrainingResult:
        updated = await self.training_repo.set_status(training.id, TrainingStatus.COMPLETED)
        if updated is None:
            raise ResourceNotFoundException("training", training.id)
        logger.info("Training completed: owner_id=%s training_id=%s", owner_id, training.id)
        await self._publish(owner_id, "training:completed", updated)
        return updated
