"""Tests for employee creation with a managed sign-in identity, and employee removal."""

from unittest.mock import AsyncMock

import pytest

from sopdesk.application.dtos.employee import EmployeeCreate
from sopdesk.application.dtos.sop import SopCreate
from sopdesk.application.dtos.training import TrainingCreate
from sopdesk.application.use_cases import EmployeeService
from sopdesk.domain.caller import UserCaller
from sopdesk.domain.enums import TrainingStatus, UserRole
from sopdesk.domain.exceptions import ConflictException, ValidationException

ADMIN = UserCaller("owner-1", "owner@example.com", UserRole.ADMIN)


def _identity(existing: str | None = None, created: str = "uid-new") -> AsyncMock:
    identity = AsyncMock()
    identity.get_uid_by_email.return_value = existing
    identity.create_user.return_value = created
    return identity


def _service(caps, identity=None, events=None) -> EmployeeService:
    return EmployeeService(
        caps.employees,
        caps.users,
        caps.sops,
        caps.trainings,
        caps.progress,
        identity,
        events,
    )


async def test_explicit_subject_id_skips_identity_provider(caps) -> None:
    identity = _identity()
    service = _service(caps, identity)
    employee = await service.create_employee(
        ADMIN, "Ann", "ann@example.com", "Ops", subject_id="uid-ann"
    )
    assert employee.id == "uid-ann"
    identity.create_user.assert_not_awaited()


async def test_existing_identity_is_reused(caps) -> None:
    identity = _identity(existing="uid-existing")
    service = _service(caps, identity)
    employee = await service.create_employee(
        ADMIN, "Ann", "ann@example.com", "Ops", password="secret123"
    )
    assert employee.subject_id == "uid-existing"
    identity.create_user.assert_not_awaited()


async def test_identity_created_here_is_rolled_back_on_conflict(caps) -> None:
    await caps.employees.create_employee(
        "owner-2",
        EmployeeCreate(subject_id="uid-new", name="X", email="x@example.com", department="Ops"),
    )
    identity = _identity(created="uid-new")
    service = _service(caps, identity)

    with pytest.raises(ConflictException):
        await service.create_employee(ADMIN, "Ann", "ann@example.com", "Ops", password="secret123")
    identity.delete_user.assert_awaited_once_with("uid-new")


async def test_reused_identity_is_not_deleted_on_conflict(caps) -> None:
    await caps.employees.create_employee(
        "owner-2",
        EmployeeCreate(subject_id="uid-x", name="X", email="x@example.com", department="Ops"),
    )
    identity = _identity(existing="uid-x")
    with pytest.raises(ConflictException):
        await _service(caps, identity).create_employee(
            ADMIN, "Ann", "ann@example.com", "Ops", password="secret123"
        )
    identity.delete_user.assert_not_awaited()


async def test_subject_required_without_identity_provider(caps) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await _service(caps).create_employee(
            ADMIN, "Ann", "ann@example.com", "Ops", password="secret123"
        )
    assert exc_info.value.details == {"field": "subject_id"}


async def test_blank_update_field_rejected(caps) -> None:
    service = _service(caps)
    await service.create_employee(ADMIN, "Ann", "ann@example.com", "Ops", subject_id="e1")
    with pytest.raises(ValidationException):
        await service.update_employee(ADMIN, "e1", {"name": "   "})


class TestAdminSubjects:
    async def test_caller_cannot_enroll_itself(self, caps) -> None:
        with pytest.raises(ConflictException):
            await _service(caps).create_employee(
                ADMIN, "Me", "owner@example.com", "Ops", subject_id="owner-1"
            )
        assert await caps.employees.get_by_id("owner-1") is None

    async def test_other_admin_cannot_be_enrolled(self, caps) -> None:
        await caps.users.set_role("admin-b", "b@example.com", UserRole.ADMIN)
        with pytest.raises(ConflictException):
            await _service(caps).create_employee(
                ADMIN, "B", "b@example.com", "Ops", subject_id="admin-b"
            )
        assert await caps.employees.get_by_id("admin-b") is None

    async def test_admin_found_by_email_is_refused(self, caps) -> None:
        await caps.users.set_role("admin-b", "b@example.com", UserRole.ADMIN)
        identity = _identity(existing="admin-b")
        with pytest.raises(ConflictException):
            await _service(caps, identity).create_employee(
                ADMIN, "B", "b@example.com", "Ops", password="secret123"
            )
        identity.delete_user.assert_not_awaited()

    async def test_staff_user_can_be_enrolled(self, caps) -> None:
        await caps.users.get_or_create("staff-1", "s@example.com")
        employee = await _service(caps).create_employee(
            ADMIN, "S", "s@example.com", "Ops", subject_id="staff-1"
        )
        assert employee.owner_id == "owner-1"


class TestDeleteEmployee:
    async def _enroll(self, service: EmployeeService, *subject_ids: str) -> None:
        for subject_id in subject_ids:
            await service.create_employee(
                ADMIN, subject_id, f"{subject_id}@example.com", "Ops", subject_id=subject_id
            )

    async def test_removed_from_sop_assignments(self, caps) -> None:
        service = _service(caps)
        await self._enroll(service, "emp-a", "emp-b")
        sop = await caps.sops.create_sop(
            "owner-1",
            SopCreate(title="S", department="Ops", content="", assigned_to=["emp-a", "emp-b"]),
        )

        await service.delete_employee(ADMIN, "emp-b")

        assert (await caps.sops.get_by_id(sop.id)).assigned_to == ["emp-a"]

    async def test_training_completes_when_remaining_assignees_done(self, caps) -> None:
        events = AsyncMock()
        service = _service(caps, events=events)
        await self._enroll(service, "emp-a", "emp-b")
        training = await caps.trainings.create_training(
            "owner-1",
            TrainingCreate(title="T", media_url="https://m", assigned_employees=["emp-a", "emp-b"]),
        )
        await caps.trainings.add_completion(training.id, "emp-a")

        await service.delete_employee(ADMIN, "emp-b")

        stored = await caps.trainings.get_by_id(training.id)
        assert stored.assigned_employees == ["emp-a"]
        assert stored.status == TrainingStatus.COMPLETED
        published = [c.args[1] for c in events.publish.await_args_list]
        assert "training:completed" in published

    async def test_training_stays_active_while_assignees_pending(self, caps) -> None:
        service = _service(caps)
        await self._enroll(service, "emp-a", "emp-b")
        training = await caps.trainings.create_training(
            "owner-1",
            TrainingCreate(title="T", media_url="https://m", assigned_employees=["emp-a", "emp-b"]),
        )

        await service.delete_employee(ADMIN, "emp-b")

        assert (await caps.trainings.get_by_id(training.id)).status == TrainingStatus.ACTIVE

    async def test_progress_records_dropped(self, caps) -> None:
        service = _service(caps)
        await self._enroll(service, "emp-a", "emp-b")
        for employee_id in ("emp-a", "emp-b"):
            pending = await caps.progress.create_pending("owner-1", employee_id, "sop-1")
            await caps.progress.claim_completion(pending, pending.created_at)

        await service.delete_employee(ADMIN, "emp-b")

        assert await caps.progress.get("emp-b", "sop-1") is None
        assert await caps.progress.get("emp-a", "sop-1") is not None
        assert await caps.progress.count_completed("owner-1") == 1
