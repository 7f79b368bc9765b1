"""Employee SOP completion with at-most-once certificate generation."""

from __future__ import annotations

import logging

from sopdesk.application.dtos.progress import ProgressResult
from sopdesk.application.dtos.sop import SopResult
from sopdesk.application.interfaces.repositories import IProgressRepository, ISopRepository
from sopdesk.application.interfaces.services import ICertificateRenderer, IEventPublisher
from sopdesk.application.services.authorization_service import ensure_owned
from sopdesk.domain.caller import EmployeeCaller
from sopdesk.domain.exceptions import (
    ContendedWriteException,
    ResourceNotFoundException,
    UpstreamFailureException,
)
from sopdesk.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

CLAIM_ATTEMPTS = 3


class SopCompletionService:
    """Complete an assigned SOP for the calling employee.

    The progress record is created on the first call. Completion is claimed
    with a conditional write, so among concurrent requests only the winner
    renders the certificate; the others (and any later call) get the stored
    state back. A failed rendering releases the claim.
    """

    def __init__(
        self,
        sop_repo: ISopRepository,
        progress_repo: IProgressRepository,
        certificates: ICertificateRenderer | None = None,
        events: IEventPublisher | None = None,
    ) -> None:
        self.sop_repo = sop_repo
        self.progress_repo = progress_repo
        self.certificates = certificates
        self.events = events

    async def _get_assigned_sop(self, caller: EmployeeCaller, sop_id: str) -> SopResult:
        sop = ensure_owned(caller, await self.sop_repo.get_by_id(sop_id), "sop", sop_id)
        if caller.employee_id not in sop.assigned_to:
            raise ResourceNotFoundException("sop", sop_id)
        return sop

    async def get_progress(self, caller: EmployeeCaller, sop_id: str) -> ProgressResult | None:
        """Return the caller's progress on the SOP, or None before the first completion call."""
        await self._get_assigned_sop(caller, sop_id)
        return await self.progress_repo.get(caller.employee_id, sop_id)

    async def complete(self, caller: EmployeeCaller, sop_id: str) -> ProgressResult:
        sop = await self._get_assigned_sop(caller, sop_id)
        progress = await self.progress_repo.get(caller.employee_id, sop_id)
        if progress is None:
            progress = await self.progress_repo.create_pending(
                caller.owner_id, caller.employee_id, sop_id
            )

        for _ in range(CLAIM_ATTEMPTS):
            if progress.completed:
                return progress
            completed_at = utc_now()
            if await self.progress_repo.claim_completion(progress, completed_at):
                return await self._finish(caller, sop, progress, completed_at)
            # Lost the race or the record changed under us; re-read and decide again.
            fresh = await self.progress_repo.get(caller.employee_id, sop_id)
            if fresh is None:
                raise ResourceNotFoundException("sop", sop_id)
            progress = fresh
        if progress.completed:
            return progress
        logger.warning(
            "Completion claim lost %d times: owner_id=%s sop_id=%s employee_id=%s",
            CLAIM_ATTEMPTS,
            caller.owner_id,
            sop_id,
            caller.employee_id,
        )
        raise ContendedWriteException("progress", progress.id)

    async def _finish(
        self,
        caller: EmployeeCaller,
        sop: SopResult,
        progress: ProgressResult,
        completed_at,
    ) -> ProgressResult:
        certificate_url: str | None = None
        if self.certificates is None:
            logger.warning(
                "Certificate service not configured; completion recorded without certificate: "
                "owner_id=%s progress_id=%s",
                caller.owner_id,
                progress.id,
            )
        else:
            try:
                certificate_url = await self.certificates.render(
                    caller.name, sop.title, completed_at, progress.id
                )
            except UpstreamFailureException:
                logger.error(
                    "Certificate rendering failed, releasing completion: owner_id=%s progress_id=%s",
                    caller.owner_id,
                    progress.id,
                )
                await self.progress_repo.release_claim(progress.id)
                raise

        stored = await self.progress_repo.set_certificate_url(progress.id, certificate_url)
        if stored is None:
            raise ResourceNotFoundException("progress", progress.id)
        logger.info(
            "SOP completed: owner_id=%s sop_id=%s employee_id=%s",
            caller.owner_id,
            sop.id,
            caller.employee_id,
        )
        if self.events:
            await self.events.publish(
                caller.owner_id,
                "sop:completed",
                {
                    "sop_id": sop.id,
                    "title": sop.title,
                    "employee_id": caller.employee_id,
                    "employee_name": caller.name,
                    "certificate_url": certificate_url,
                },
            )
        return stored
