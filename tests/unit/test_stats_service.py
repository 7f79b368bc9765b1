"""Tests for dashboard statistics."""

from sopdesk.application.dtos.employee import EmployeeCreate
from sopdesk.application.dtos.sop import SopCreate
from sopdesk.application.dtos.stats import StatsResult
from sopdesk.application.dtos.training import TrainingCreate
from sopdesk.application.use_cases import StatsService
from sopdesk.domain.caller import UserCaller
from sopdesk.domain.enums import TrainingStatus, UserRole
from sopdesk.shared.utils import utc_now

ADMIN = UserCaller("owner-1", "owner@example.com", UserRole.ADMIN)


def _service(caps) -> StatsService:
    return StatsService(caps.employees, caps.sops, caps.trainings, caps.progress)


async def test_empty_tenant_is_all_zeros(caps) -> None:
    stats = await _service(caps).get_stats(ADMIN)
    assert stats == StatsResult(0, 0, 0, 0)


async def test_counts_are_scoped_to_tenant(caps) -> None:
    await caps.employees.create_employee(
        "owner-1", EmployeeCreate(subject_id="e1", name="A", email="a@x.com", department="Ops")
    )
    await caps.employees.create_employee(
        "owner-2", EmployeeCreate(subject_id="e2", name="B", email="b@x.com", department="Ops")
    )
    sop = await caps.sops.create_sop(
        "owner-1", SopCreate(title="S1", department="Ops", content="c", assigned_to=["e1"])
    )
    await caps.sops.create_sop("owner-1", SopCreate(title="S2", department="Ops", content="c"))
    training = await caps.trainings.create_training(
        "owner-1", TrainingCreate(title="T", media_url="https://m")
    )
    await caps.trainings.set_status(training.id, TrainingStatus.COMPLETED)
    pending = await caps.progress.create_pending("owner-1", "e1", sop.id)
    await caps.progress.claim_completion(pending, utc_now())

    stats = await _service(caps).get_stats(ADMIN)

    assert stats.employees == 1
    assert stats.completed_trainings == 1
    assert stats.active_trainings == 0
    assert stats.pending_sops == 1
