"""Firestore-backed training video repository (implements ITrainingRepository)."""

from __future__ import annotations

from sopdesk.application.dtos.training import TrainingCreate, TrainingResult
from sopdesk.domain.enums import TrainingStatus
from sopdesk.infrastructure.firebase._rest_client import FirestoreRESTClient
from sopdesk.infrastructure.firebase.collections import COLLECTION_TRAINING_VIDEOS
from sopdesk.shared.utils.datetime import utc_now
from sopdesk.shared.utils.generators import generate_cuid


class FirestoreTrainingRepository:
    """Training repository using Firestore.

    completed_by is maintained with the appendMissingElements transform so
    concurrent completions never drop each other's entries.
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_TRAINING_VIDEOS)

    def _to_result(self, doc_id: str, data: dict) -> TrainingResult:
        return TrainingResult(
            id=doc_id,
            owner_id=data.get("owner_id", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            media_url=data.get("media_url", ""),
            thumbnail_url=data.get("thumbnail_url"),
            assigned_employees=list(data.get("assigned_employees") or []),
            status=TrainingStatus(data.get("status", TrainingStatus.ACTIVE.value)),
            completed_by=list(data.get("completed_by") or []),
            created_at=data.get("created_at"),
        )

    async def get_by_id(self, training_id: str) -> TrainingResult | None:
        doc = await self._coll.document(training_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def create_training(self, owner_id: str, data: TrainingCreate) -> TrainingResult:
        training_id = generate_cuid()
        doc = {
            "owner_id": owner_id,
            "title": data.title,
            "description": data.description,
            "media_url": data.media_url,
            "thumbnail_url": data.thumbnail_url,
            "assigned_employees": list(dict.fromkeys(data.assigned_employees)),
            "status": TrainingStatus.ACTIVE.value,
            "completed_by": [],
            "created_at": utc_now(),
        }
        await self._coll.document(training_id).set(doc)
        return self._to_result(training_id, doc)

    async def list_by_owner(self, owner_id: str) -> list[TrainingResult]:
        q = self._coll.where("owner_id", "==", owner_id).order_by("created_at", "DESCENDING")
        return [self._to_result(s.id, s.to_dict()) async for s in q.stream()]

    async def delete_training(self, training_id: str) -> None:
        await self._coll.document(training_id).delete()

    async def remove_assignee(self, owner_id: str, employee_id: str) -> list[TrainingResult]:
        """Drop employee_id from assigned_employees of every owner training.

        Returns the affected trainings as stored after the change.
        """
        q = (
            self._coll.where("owner_id", "==", owner_id)
            .where("assigned_employees", "array_contains", employee_id)
        )
        training_ids = [s.id async for s in q.stream()]
        affected: list[TrainingResult] = []
        for training_id in training_ids:
            if await self._coll.document(training_id).array_remove(
                "assigned_employees", [employee_id]
            ):
                training = await self.get_by_id(training_id)
                if training is not None:
                    affected.append(training)
        return affected

    async def add_completion(self, training_id: str, subject_id: str) -> TrainingResult | None:
        """Append subject_id to completed_by if missing; return the fresh document."""
        doc_ref = self._coll.document(training_id)
        if not await doc_ref.array_union("completed_by", [subject_id]):
            return None
        return await self.get_by_id(training_id)

    async def set_status(
        self, training_id: str, status: TrainingStatus
    ) -> TrainingResult | None:
        doc_ref = self._coll.document(training_id)
        if not await doc_ref.update({"status": status.value}):
            return None
        return await self.get_by_id(training_id)

    async def count_by_owner_and_status(self, owner_id: str, status: TrainingStatus) -> int:
        return await (
            self._coll.where("owner_id", "==", owner_id)
            .where("status", "==", status.value)
            .count()
        )
