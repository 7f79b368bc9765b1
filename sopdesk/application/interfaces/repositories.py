"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
Ownership is enforced by services, not here: repositories look records up by id.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from sopdesk.domain.enums import LogType, TrainingStatus, UserRole

if TYPE_CHECKING:
    from sopdesk.application.dtos.employee import EmployeeCreate, EmployeeResult
    from sopdesk.application.dtos.progress import ProgressResult
    from sopdesk.application.dtos.settings import SettingsResult
    from sopdesk.application.dtos.sop import SopCreate, SopResult
    from sopdesk.application.dtos.subscription import SubscriptionResult
    from sopdesk.application.dtos.system_log import SystemLogResult
    from sopdesk.application.dtos.training import TrainingCreate, TrainingResult
    from sopdesk.application.dtos.user import UserResult


class IUserRepository(Protocol):
    """Protocol for user repository (keyed by subject id)."""

    async def get_by_id(self, subject_id: str) -> UserResult | None:
        """Return user by subject id."""

    async def get_or_create(self, subject_id: str, email: str) -> UserResult:
        """Return existing user or create one with role staff (atomic on the document id)."""

    async def set_role(self, subject_id: str, email: str, role: UserRole) -> UserResult:
        """Set role, creating the user if absent; return updated user."""


class IEmployeeRepository(Protocol):
    """Protocol for employee repository (keyed by subject id)."""

    async def get_by_id(self, employee_id: str) -> EmployeeResult | None:
        """Return employee by id (= subject id)."""

    async def create_employee(self, owner_id: str, data: EmployeeCreate) -> EmployeeResult:
        """Create employee; raise ConflictException if the subject id is taken."""

    async def list_by_owner(self, owner_id: str) -> list[EmployeeResult]:
        """Return employees of owner, newest first."""

    async def update_employee(
        self, employee_id: str, fields: dict[str, Any]
    ) -> EmployeeResult | None:
        """Merge fields (updated_at stamped); None if missing."""

    async def delete_employee(self, employee_id: str) -> None:
        """Delete employee (idempotent)."""

    async def count_by_owner(self, owner_id: str) -> int:
        """Return number of employees of owner."""


class ISopRepository(Protocol):
    """Protocol for SOP repository."""

    async def get_by_id(self, sop_id: str) -> SopResult | None:
        """Return SOP by id."""

    async def create_sop(self, owner_id: str, data: SopCreate) -> SopResult:
        """Create SOP for owner."""

    async def list_by_owner(self, owner_id: str, limit: int | None = None) -> list[SopResult]:
        """Return SOPs of owner, most recently updated first."""

    async def list_assigned(self, owner_id: str, employee_id: str) -> list[SopResult]:
        """Return SOPs of owner assigned to employee, most recently updated first."""

    async def update_sop(self, sop_id: str, fields: dict[str, Any]) -> SopResult | None:
        """Merge fields (updated_at stamped); None if missing."""

    async def delete_sop(self, sop_id: str) -> None:
        """Delete SOP (idempotent)."""

    async def remove_assignee(self, owner_id: str, employee_id: str) -> int:
        """Remove employee_id from assigned_to of the owner's SOPs; return count changed."""

    async def count_by_owner(self, owner_id: str) -> int:
        """Return number of SOPs of owner."""


class ITrainingRepository(Protocol):
    """Protocol for training video repository."""

    async def get_by_id(self, training_id: str) -> TrainingResult | None:
        """Return training by id."""

    async def create_training(self, owner_id: str, data: TrainingCreate) -> TrainingResult:
        """Create training with status active and empty completed_by."""

    async def list_by_owner(self, owner_id: str) -> list[TrainingResult]:
        """Return trainings of owner, newest first."""

    async def delete_training(self, training_id: str) -> None:
        """Delete training (idempotent)."""

    async def remove_assignee(self, owner_id: str, employee_id: str) -> list[TrainingResult]:
        """Remove employee_id from assigned_employees; return the affected trainings."""

    async def add_completion(self, training_id: str, subject_id: str) -> TrainingResult | None:
        """Atomically add subject_id to completed_by (set semantics); return fresh record."""

    async def set_status(
        self, training_id: str, status: TrainingStatus
    ) -> TrainingResult | None:
        """Set status; return fresh record or None if missing."""

    async def count_by_owner_and_status(self, owner_id: str, status: TrainingStatus) -> int:
        """Return number of trainings of owner in status."""


class IProgressRepository(Protocol):
    """Protocol for per-(employee, SOP) completion progress."""

    async def get(self, employee_id: str, sop_id: str) -> ProgressResult | None:
        """Return progress record or None."""

    async def create_pending(
        self, owner_id: str, employee_id: str, sop_id: str
    ) -> ProgressResult:
        """Create record with completed=false, or return the existing one."""

    async def claim_completion(self, progress: ProgressResult, completed_at: datetime) -> bool:
        """Set completed=true only if the record is unchanged since progress was read."""

    async def set_certificate_url(
        self, progress_id: str, certificate_url: str | None
    ) -> ProgressResult | None:
        """Store the certificate reference; return fresh record."""

    async def release_claim(self, progress_id: str) -> None:
        """Revert a claimed completion (completed=false, completed_at cleared)."""

    async def count_completed(self, owner_id: str) -> int:
        """Return number of completed progress records in owner's tenant."""

    async def delete_for_sop(self, sop_id: str) -> None:
        """Delete all progress records of a SOP."""

    async def delete_for_employee(self, owner_id: str, employee_id: str) -> None:
        """Delete all progress records of an employee in owner's tenant."""


class ISubscriptionRepository(Protocol):
    """Protocol for subscription repository (one per user)."""

    async def get_by_user(self, user_id: str) -> SubscriptionResult | None:
        """Return user's subscription."""

    async def upsert(self, subscription: SubscriptionResult) -> SubscriptionResult:
        """Create or replace user's subscription."""


class ISettingsRepository(Protocol):
    """Protocol for per-tenant system settings (one document per owner)."""

    async def get(self, owner_id: str) -> SettingsResult | None:
        """Return settings or None."""

    async def create_if_absent(
        self, owner_id: str, groups: dict[str, dict[str, Any]]
    ) -> SettingsResult:
        """Create settings with groups unless present; return stored settings."""

    async def update_groups(
        self, owner_id: str, groups: dict[str, dict[str, Any]]
    ) -> SettingsResult | None:
        """Replace the given groups (already merged by the caller)."""


class ISystemLogRepository(Protocol):
    """Protocol for the append-only system log."""

    async def append(self, owner_id: str, message: str, log_type: LogType) -> SystemLogResult:
        """Append one entry."""

    async def list_recent(self, owner_id: str, limit: int) -> list[SystemLogResult]:
        """Return the most recent entries of owner, newest first."""
