"""Firestore-backed employee SOP progress repository (implements IProgressRepository)."""

from __future__ import annotations

from datetime import datetime

from sopdesk.application.dtos.progress import ProgressResult
from sopdesk.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
    PreconditionFailedError,
)
from sopdesk.infrastructure.firebase.collections import COLLECTION_EMPLOYEE_SOP_PROGRESS
from sopdesk.shared.utils.datetime import utc_now


def progress_doc_id(employee_id: str, sop_id: str) -> str:
    """Deterministic document id: one progress record per (employee, SOP)."""
    return f"{employee_id}__{sop_id}"


class FirestoreProgressRepository:
    """Progress repository using Firestore.

    Completion is claimed with an updateTime precondition, so of two
    concurrent completions exactly one observes completed=false and wins.
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_EMPLOYEE_SOP_PROGRESS)

    def _to_result(self, doc_id: str, data: dict, update_time: str | None) -> ProgressResult:
        return ProgressResult(
            id=doc_id,
            owner_id=data.get("owner_id", ""),
            employee_id=data.get("employee_id", ""),
            sop_id=data.get("sop_id", ""),
            completed=bool(data.get("completed", False)),
            completed_at=data.get("completed_at"),
            certificate_url=data.get("certificate_url"),
            created_at=data.get("created_at"),
            update_time=update_time,
        )

    async def _get_by_doc_id(self, doc_id: str) -> ProgressResult | None:
        doc = await self._coll.document(doc_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict(), doc.update_time)

    async def get(self, employee_id: str, sop_id: str) -> ProgressResult | None:
        return await self._get_by_doc_id(progress_doc_id(employee_id, sop_id))

    async def create_pending(
        self, owner_id: str, employee_id: str, sop_id: str
    ) -> ProgressResult:
        """Create the record with completed=false; return the stored record either way."""
        doc_id = progress_doc_id(employee_id, sop_id)
        try:
            await self._coll.create(doc_id, {
                "owner_id": owner_id,
                "employee_id": employee_id,
                "sop_id": sop_id,
                "completed": False,
                "completed_at": None,
                "certificate_url": None,
                "created_at": utc_now(),
            })
        except DocumentExistsError:
            pass
        stored = await self._get_by_doc_id(doc_id)
        if stored is None:
            raise RuntimeError(f"progress record vanished after create: {doc_id}")
        return stored

    async def claim_completion(self, progress: ProgressResult, completed_at: datetime) -> bool:
        """Mark completed if nobody wrote the record since progress was read."""
        if progress.completed or not progress.update_time:
            return False
        try:
            return await self._coll.document(progress.id).update(
                {"completed": True, "completed_at": completed_at},
                expected_update_time=progress.update_time,
            )
        except PreconditionFailedError:
            return False

    async def set_certificate_url(
        self, progress_id: str, certificate_url: str | None
    ) -> ProgressResult | None:
        if not await self._coll.document(progress_id).update(
            {"certificate_url": certificate_url}
        ):
            return None
        return await self._get_by_doc_id(progress_id)

    async def release_claim(self, progress_id: str) -> None:
        await self._coll.document(progress_id).update(
            {"completed": False, "completed_at": None}
        )

    async def count_completed(self, owner_id: str) -> int:
        return await (
            self._coll.where("owner_id", "==", owner_id)
            .where("completed", "==", True)
            .count()
        )

    async def delete_for_sop(self, sop_id: str) -> None:
        await self._delete_where("sop_id", sop_id)

    async def delete_for_employee(self, owner_id: str, employee_id: str) -> None:
        await self._delete_where("employee_id", employee_id, owner_id=owner_id)

    async def _delete_where(self, field: str, value: str, owner_id: str | None = None) -> None:
        q = self._coll.where(field, "==", value)
        if owner_id is not None:
            q = q.where("owner_id", "==", owner_id)
        doc_ids = [s.id async for s in q.stream()]
        for doc_id in doc_ids:
            await self._coll.document(doc_id).delete()
