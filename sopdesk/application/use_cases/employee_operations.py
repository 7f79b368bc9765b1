"""Employee operations: create (with optional managed identity), list, get, update, delete."""

from __future__ import annotations

import logging
from typing import Any

from sopdesk.application.dtos.employee import EmployeeCreate, EmployeeResult
from sopdesk.application.interfaces.repositories import (
    IEmployeeRepository,
    IProgressRepository,
    ISopRepository,
    ITrainingRepository,
    IUserRepository,
)
from sopdesk.application.interfaces.services import IEventPublisher, IManagedIdentity
from sopdesk.application.services.authorization_service import ensure_owned
from sopdesk.application.use_cases.training_operations import is_fully_completed
from sopdesk.domain.caller import EmployeeCaller, UserCaller
from sopdesk.domain.enums import EmployeeRole, EmployeeStatus, TrainingStatus, UserRole
from sopdesk.domain.exceptions import (
    ConflictException,
    ResourceNotFoundException,
    SopDeskException,
    ValidationException,
)

logger = logging.getLogger(__name__)


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationException(f"{field} is required", field=field)
    return value.strip()


class EmployeeService:
    """Admin-managed employee records of one tenant.

    The employee's subject id is either supplied by the client or, when a
    managed identity capability is available and a password is given,
    looked up or created at the identity provider. An identity created in
    this request is deleted again if the insert fails. Subjects that are
    admins (the caller included) cannot be enrolled as employees.

    Deleting an employee also removes it from SOP and training assignments
    and drops its progress records.
    """

    def __init__(
        self,
        employee_repo: IEmployeeRepository,
        user_repo: IUserRepository,
        sop_repo: ISopRepository,
        training_repo: ITrainingRepository,
        progress_repo: IProgressRepository,
        managed_identity: IManagedIdentity | None = None,
        events: IEventPublisher | None = None,
    ) -> None:
        self.employee_repo = employee_repo
        self.user_repo = user_repo
        self.sop_repo = sop_repo
        self.training_repo = training_repo
        self.progress_repo = progress_repo
        self.managed_identity = managed_identity
        self.events = events

    async def _publish(self, owner_id: str, event_type: str, employee: EmployeeResult) -> None:
        if self.events:
            await self.events.publish(
                owner_id, event_type, {"employee_id": employee.id, "name": employee.name}
            )

    async def _resolve_subject(
        self, email: str, name: str, subject_id: str | None, password: str | None
    ) -> tuple[str, bool]:
        """Return (subject_id, created_here)."""
        if subject_id and subject_id.strip():
            return subject_id.strip(), False
        if self.managed_identity is None or not password:
            raise ValidationException(
                "subject_id is required when managed identity is unavailable",
                field="subject_id",
            )
        existing = await self.managed_identity.get_uid_by_email(email)
        if existing:
            return existing, False
        uid = await self.managed_identity.create_user(email, password, name)
        return uid, True

    async def create_employee(
        self,
        caller: UserCaller,
        name: str | None,
        email: str | None,
        department: str | None,
        role: EmployeeRole = EmployeeRole.STAFF,
        status: EmployeeStatus = EmployeeStatus.ACTIVE,
        subject_id: str | None = None,
        password: str | None = None,
    ) -> EmployeeResult:
        """Create an employee in the caller's tenant.

        Raises ValidationException for blank required fields and
        ConflictException when the subject is already an employee or is an
        admin.
        """
        name = _require_text(name, "name")
        email = _require_text(email, "email")
        department = _require_text(department, "department")

        uid, created_here = await self._resolve_subject(email, name, subject_id, password)
        data = EmployeeCreate(
            subject_id=uid,
            name=name,
            email=email,
            department=department,
            role=role,
            status=status,
        )
        try:
            await self._ensure_not_admin(caller, uid)
            employee = await self.employee_repo.create_employee(caller.owner_id, data)
        except Exception:
            if created_here and self.managed_identity is not None:
                await self._rollback_identity(uid)
            raise
        logger.info("Employee created: owner_id=%s employee_id=%s", caller.owner_id, employee.id)
        await self._publish(caller.owner_id, "employee:created", employee)
        return employee

    async def _ensure_not_admin(self, caller: UserCaller, uid: str) -> None:
        # Employee records take precedence over users at caller resolution.
        if uid == caller.subject_id:
            raise ConflictException("admin", "subject_id", uid)
        user = await self.user_repo.get_by_id(uid)
        if user is not None and user.role == UserRole.ADMIN:
            logger.warning(
                "Refused to enroll admin as employee: owner_id=%s subject_id=%s",
                caller.owner_id,
                uid,
            )
            raise ConflictException("admin", "subject_id", uid)

    async def _rollback_identity(self, uid: str) -> None:
        try:
            await self.managed_identity.delete_user(uid)
        except SopDeskException:
            logger.exception("Failed to roll back managed identity: uid=%s", uid)

    async def list_employees(self, caller: UserCaller) -> list[EmployeeResult]:
        return await self.employee_repo.list_by_owner(caller.owner_id)

    async def get_employee(self, caller: UserCaller, employee_id: str) -> EmployeeResult:
        employee = await self.employee_repo.get_by_id(employee_id)
        return ensure_owned(caller, employee, "employee", employee_id)

    async def get_me(self, caller: EmployeeCaller) -> EmployeeResult:
        employee = await self.employee_repo.get_by_id(caller.employee_id)
        return ensure_owned(caller, employee, "employee", caller.employee_id)

    async def update_employee(
        self, caller: UserCaller, employee_id: str, patch: dict[str, Any]
    ) -> EmployeeResult:
        """Shallow-merge patch into the employee. Blank required fields are rejected."""
        await self.get_employee(caller, employee_id)
        fields: dict[str, Any] = {}
        for key, value in patch.items():
            if key in ("name", "email", "department"):
                value = _require_text(value, key)
            fields[key] = value.value if isinstance(value, (EmployeeRole, EmployeeStatus)) else value
        if not fields:
            return await self.get_employee(caller, employee_id)
        updated = await self.employee_repo.update_employee(employee_id, fields)
        if updated is None:
            raise ResourceNotFoundException("employee", employee_id)
        await self._publish(caller.owner_id, "employee:updated", updated)
        return updated

    async def delete_employee(self, caller: UserCaller, employee_id: str) -> None:
        """Delete the employee, then detach it from assignments and drop its progress.

        The record goes first so the id can no longer resolve or be assigned.
        Trainings whose remaining assignees have all completed move to
        COMPLETED.
        """
        employee = await self.get_employee(caller, employee_id)
        owner_id = caller.owner_id
        await self.employee_repo.delete_employee(employee_id)
        sops_changed = await self.sop_repo.remove_assignee(owner_id, employee_id)
        trainings = await self.training_repo.remove_assignee(owner_id, employee_id)
        await self.progress_repo.delete_for_employee(owner_id, employee_id)
        for training in trainings:
            if training.status == TrainingStatus.ACTIVE and is_fully_completed(training):
                await self._complete_training(owner_id, training.id)
        logger.info(
            "Employee deleted: owner_id=%s employee_id=%s sops=%d trainings=%d",
            owner_id,
            employee_id,
            sops_changed,
            len(trainings),
        )
        await self._publish(owner_id, "employee:deleted", employee)

    async def _complete_training(self, owner_id: str, training_id: str) -> None:
        updated = await self.training_repo.set_status(training_id, TrainingStatus.COMPLETED)
        if updated is None:
            return
        logger.info("Training completed: owner_id=%s training_id=%s", owner_id, training_id)
        if self.events:
            await self.events.publish(
                owner_id, "training:completed", {"training_id": updated.id, "title": updated.title}
            )
