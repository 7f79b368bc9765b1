"""Firestore-backed employee repository (implements IEmployeeRepository)."""

from __future__ import annotations

from typing import Any

from sopdesk.application.dtos.employee import EmployeeCreate, EmployeeResult
from sopdesk.domain.enums import EmployeeRole, EmployeeStatus
from sopdesk.domain.exceptions import ConflictException
from sopdesk.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    FirestoreRESTClient,
)
from sopdesk.infrastructure.firebase.collections import COLLECTION_EMPLOYEES
from sopdesk.shared.utils.datetime import utc_now


class FirestoreEmployeeRepository:
    """Employee repository using Firestore.

    Documents are keyed by subject id, so subject uniqueness is enforced by
    the create call itself (409 -> ConflictException).
    """

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_EMPLOYEES)

    def _to_result(self, doc_id: str, data: dict) -> EmployeeResult:
        return EmployeeResult(
            id=doc_id,
            owner_id=data.get("owner_id", ""),
            subject_id=data.get("subject_id", doc_id),
            name=data.get("name", ""),
            email=data.get("email", ""),
            department=data.get("department", ""),
            role=EmployeeRole(data.get("role", EmployeeRole.STAFF.value)),
            status=EmployeeStatus(data.get("status", EmployeeStatus.ACTIVE.value)),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    async def get_by_id(self, employee_id: str) -> EmployeeResult | None:
        """Return employee by id."""
        doc = await self._coll.document(employee_id).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def create_employee(self, owner_id: str, data: EmployeeCreate) -> EmployeeResult:
        """Create employee keyed by subject id; raise ConflictException if it exists."""
        now = utc_now()
        doc = {
            "owner_id": owner_id,
            "subject_id": data.subject_id,
            "name": data.name,
            "email": data.email,
            "department": data.department,
            "role": data.role.value,
            "status": data.status.value,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await self._coll.create(data.subject_id, doc)
        except DocumentExistsError:
            raise ConflictException("employee", "subject_id", data.subject_id) from None
        return self._to_result(data.subject_id, doc)

    async def list_by_owner(self, owner_id: str) -> list[EmployeeResult]:
        """Return employees of owner, newest first (server-side filter and order)."""
        results: list[EmployeeResult] = []
        q = self._coll.where("owner_id", "==", owner_id).order_by("created_at", "DESCENDING")
        async for snapshot in q.stream():
            results.append(self._to_result(snapshot.id, snapshot.to_dict()))
        return results

    async def update_employee(
        self, employee_id: str, fields: dict[str, Any]
    ) -> EmployeeResult | None:
        """Merge fields into the employee; return updated result or None if not found."""
        doc_ref = self._coll.document(employee_id)
        updates = {**fields, "updated_at": utc_now()}
        if not await doc_ref.update(updates):
            return None
        doc = await doc_ref.get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def delete_employee(self, employee_id: str) -> None:
        await self._coll.document(employee_id).delete()

    async def count_by_owner(self, owner_id: str) -> int:
        return await self._coll.where("owner_id", "==", owner_id).count()
