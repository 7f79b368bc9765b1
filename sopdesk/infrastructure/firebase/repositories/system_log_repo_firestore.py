"""Firestore-backed system log repository (implements ISystemLogRepository)."""

from __future__ import annotations

from sopdesk.application.dtos.system_log import SystemLogResult
from sopdesk.domain.enums import LogType
from sopdesk.infrastructure.firebase._rest_client import FirestoreRESTClient
from sopdesk.infrastructure.firebase.collections import COLLECTION_SYSTEM_LOGS
from sopdesk.shared.utils.datetime import utc_now
from sopdesk.shared.utils.generators import generate_cuid


class FirestoreSystemLogRepository:
    """Append-only log; reads are truncated to the most recent entries."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_SYSTEM_LOGS)

    async def append(self, owner_id: str, message: str, log_type: LogType) -> SystemLogResult:
        log_id = generate_cuid()
        now = utc_now()
        await self._coll.document(log_id).set({
            "owner_id": owner_id,
            "message": message,
            "type": log_type.value,
            "created_at": now,
        })
        return SystemLogResult(
            id=log_id, owner_id=owner_id, message=message, type=log_type, created_at=now
        )

    async def list_recent(self, owner_id: str, limit: int) -> list[SystemLogResult]:
        q = (
            self._coll.where("owner_id", "==", owner_id)
            .order_by("created_at", "DESCENDING")
            .limit(limit)
        )
        results: list[SystemLogResult] = []
        async for snapshot in q.stream():
            data = snapshot.to_dict()
            results.append(
                SystemLogResult(
                    id=snapshot.id,
                    owner_id=data.get("owner_id", ""),
                    message=data.get("message", ""),
                    type=LogType(data.get("type", LogType.INFO.value)),
                    created_at=data.get("created_at"),
                )
            )
        return results
