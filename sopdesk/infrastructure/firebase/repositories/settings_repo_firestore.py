"""Firestore-backed system settings repository (implements ISettingsRepository)."""

from __future__ import annotations

from typing import Any

from sopdesk.application.dtos.settings import SettingsResult
from sopdesk.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from sopdesk.infrastructure.firebase.collections import COLLECTION_SYSTEM_SETTINGS
from sopdesk.shared.utils.datetime import utc_now

_META_FIELDS = frozenset({"owner_id", "updated_at"})


class FirestoreSettingsRepository:
    """Settings repository using Firestore. One document per owner, keyed by owner id."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_SYSTEM_SETTINGS)

    def _to_result(self, owner_id: str, data: dict) -> SettingsResult:
        groups = {
            k: dict(v) for k, v in data.items()
            if k not in _META_FIELDS and isinstance(v, dict)
        }
        return SettingsResult(
            owner_id=owner_id,
            groups=groups,
            updated_at=data.get("updated_at"),
        )

    async def get(self, owner_id: str) -> SettingsResult | None:
        doc = await self._coll.document(owner_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def create_if_absent(
        self, owner_id: str, groups: dict[str, dict[str, Any]]
    ) -> SettingsResult:
        data = {**groups, "owner_id": owner_id, "updated_at": utc_now()}
        try:
            await self._coll.create(owner_id, data)
        except DocumentExistsError:
            existing = await self.get(owner_id)
            if existing:
                return existing
            raise
        return self._to_result(owner_id, data)

    async def update_groups(
        self, owner_id: str, groups: dict[str, dict[str, Any]]
    ) -> SettingsResult | None:
        doc_ref = self._coll.document(owner_id)
        if not await doc_ref.update({**groups, "updated_at": utc_now()}):
            return None
        return await self.get(owner_id)
