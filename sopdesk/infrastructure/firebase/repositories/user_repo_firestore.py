"""Firestore-backed user repository (implements IUserRepository)."""

from __future__ import annotations

from sopdesk.application.dtos.user import UserResult
from sopdesk.domain.enums import UserRole
from sopdesk.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from sopdesk.infrastructure.firebase.collections import COLLECTION_USERS
from sopdesk.shared.utils.datetime import utc_now


class FirestoreUserRepository:
    """User repository using Firestore. Document id is the subject id."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_USERS)

    def _to_result(self, doc_id: str, data: dict) -> UserResult:
        return UserResult(
            id=doc_id,
            email=data.get("email", ""),
            role=UserRole(data.get("role", UserRole.STAFF.value)),
            created_at=data.get("created_at"),
        )

    async def get_by_id(self, subject_id: str) -> UserResult | None:
        """Return user by subject id."""
        doc = await self._coll.document(subject_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def get_or_create(self, subject_id: str, email: str) -> UserResult:
        """Return user, creating it with role staff on first sight.

        Concurrent first requests race on create; the loser reads the winner's document.
        """
        existing = await self.get_by_id(subject_id)
        if existing:
            return existing
        data = {
            "email": email,
            "role": UserRole.STAFF.value,
            "created_at": utc_now(),
        }
        try:
            await self._coll.create(subject_id, data)
        except DocumentExistsError:
            existing = await self.get_by_id(subject_id)
            if existing:
                return existing
            raise
        return self._to_result(subject_id, data)

    async def set_role(self, subject_id: str, email: str, role: UserRole) -> UserResult:
        """Set role (upsert): update when present, otherwise create."""
        doc_ref = self._coll.document(subject_id)
        if await doc_ref.update({"email": email, "role": role.value}):
            doc = await doc_ref.get()
            if doc:
                return self._to_result(doc.id, doc.to_dict())
        data = {"email": email, "role": role.value, "created_at": utc_now()}
        try:
            await self._coll.create(subject_id, data)
        except DocumentExistsError:
            await doc_ref.update({"email": email, "role": role.value})
            doc = await doc_ref.get()
            if doc:
                return self._to_result(doc.id, doc.to_dict())
        return self._to_result(subject_id, data)
