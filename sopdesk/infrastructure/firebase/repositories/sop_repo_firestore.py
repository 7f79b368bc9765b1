"""Firestore-backed SOP repository (implements ISopRepository)."""

from __future__ import annotations

from typing import Any

from sopdesk.application.dtos.sop import SopCreate, SopResult
from sopdesk.infrastructure.firebase._rest_client import FirestoreRESTClient
from sopdesk.infrastructure.firebase.collections import COLLECTION_SOPS
from sopdesk.shared.utils.datetime import utc_now
from sopdesk.shared.utils.generators import generate_cuid


class FirestoreSopRepository:
    """SOP repository using Firestore. Lists are ordered by updated_at descending."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_SOPS)

    def _to_result(self, doc_id: str, data: dict) -> SopResult:
        return SopResult(
            id=doc_id,
            owner_id=data.get("owner_id", ""),
            title=data.get("title", ""),
            department=data.get("department", ""),
            content=data.get("content", ""),
            assigned_to=list(data.get("assigned_to") or []),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    async def get_by_id(self, sop_id: str) -> SopResult | None:
        doc = await self._coll.document(sop_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def create_sop(self, owner_id: str, data: SopCreate) -> SopResult:
        """Create SOP with a generated id."""
        now = utc_now()
        sop_id = generate_cuid()
        doc = {
            "owner_id": owner_id,
            "title": data.title,
            "department": data.department,
            "content": data.content,
            "assigned_to": list(data.assigned_to),
            "created_at": now,
            "updated_at": now,
        }
        await self._coll.document(sop_id).set(doc)
        return self._to_result(sop_id, doc)

    async def list_by_owner(self, owner_id: str, limit: int | None = None) -> list[SopResult]:
        q = self._coll.where("owner_id", "==", owner_id).order_by("updated_at", "DESCENDING")
        if limit:
            q = q.limit(limit)
        return [self._to_result(s.id, s.to_dict()) async for s in q.stream()]

    async def list_assigned(self, owner_id: str, employee_id: str) -> list[SopResult]:
        q = (
            self._coll.where("owner_id", "==", owner_id)
            .where("assigned_to", "array_contains", employee_id)
            .order_by("updated_at", "DESCENDING")
        )
        return [self._to_result(s.id, s.to_dict()) async for s in q.stream()]

    async def update_sop(self, sop_id: str, fields: dict[str, Any]) -> SopResult | None:
        """Merge fields; updated_at is always stamped."""
        doc_ref = self._coll.document(sop_id)
        if not await doc_ref.update({**fields, "updated_at": utc_now()}):
            return None
        doc = await doc_ref.get()
        return self._to_result(doc.id, doc.to_dict()) if doc else None

    async def delete_sop(self, sop_id: str) -> None:
        await self._coll.document(sop_id).delete()

    async def remove_assignee(self, owner_id: str, employee_id: str) -> int:
        """Drop employee_id from assigned_to of every owner SOP; return how many changed."""
        sops = await self.list_assigned(owner_id, employee_id)
        for sop in sops:
            await self._coll.document(sop.id).array_remove("assigned_to", [employee_id])
        return len(sops)

    async def count_by_owner(self, owner_id: str) -> int:
        return await self._coll.where("owner_id", "==", owner_id).count()
