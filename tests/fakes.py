"""In-memory test doubles.

FakeFirestore mirrors the surface of FirestoreRESTClient that the
repositories use: document get/set/update/array_union/array_remove/delete,
collection create, and where/order_by/limit/offset queries with stream() and count().
Every write bumps the document's update_time, so conditional updates
behave like the real store.
"""

from __future__ import annotations

import copy
import itertools
from collections.abc import AsyncIterator
from typing import Any

from sopdesk.application.dtos.identity import VerifiedIdentity
from sopdesk.domain.exceptions import InvalidCredentialException
from sopdesk.infrastructure.firebase._rest_client import (
    DocumentExistsError,
    DocumentSnapshot,
    PreconditionFailedError,
)

_clock = itertools.count(1)


def _next_update_time() -> str:
    return f"2025-01-01T00:00:00.{next(_clock):09d}Z"


class FakeDocument:
    def __init__(self, collection: "FakeCollection", doc_id: str) -> None:
        self._coll = collection
        self.id = doc_id

    async def get(self) -> DocumentSnapshot | None:
        entry = self._coll.docs.get(self.id)
        if entry is None:
            return None
        data, update_time, _ = entry
        return DocumentSnapshot(self.id, copy.deepcopy(data), update_time)

    async def set(self, data: dict[str, Any]) -> None:
        self._coll.write(self.id, copy.deepcopy(data))

    async def update(
        self,
        data: dict[str, Any],
        *,
        expected_update_time: str | None = None,
    ) -> bool:
        entry = self._coll.docs.get(self.id)
        if entry is None:
            if expected_update_time:
                raise PreconditionFailedError(self.id)
            return False
        current, update_time, _ = entry
        if expected_update_time and expected_update_time != update_time:
            raise PreconditionFailedError(self.id)
        merged = {**current, **copy.deepcopy(data)}
        self._coll.write(self.id, merged)
        return True

    async def array_union(self, field: str, values: list[Any]) -> bool:
        entry = self._coll.docs.get(self.id)
        if entry is None:
            return False
        current = copy.deepcopy(entry[0])
        items = list(current.get(field) or [])
        for value in values:
            if value not in items:
                items.append(value)
        current[field] = items
        self._coll.write(self.id, current)
        return True

    async def array_remove(self, field: str, values: list[Any]) -> bool:
        entry = self._coll.docs.get(self.id)
        if entry is None:
            return False
        current = copy.deepcopy(entry[0])
        current[field] = [item for item in current.get(field) or [] if item not in values]
        self._coll.write(self.id, current)
        return True

    async def delete(self) -> None:
        self._coll.docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection: "FakeCollection") -> None:
        self._coll = collection
        self._filters: list[tuple[str, str, Any]] = []
        self._order: tuple[str, str] | None = None
        self._offset = 0
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> "FakeQuery":
        self._filters.append((field, op, value))
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> "FakeQuery":
        self._order = (field, direction)
        return self

    def offset(self, n: int) -> "FakeQuery":
        self._offset = n
        return self

    def limit(self, n: int) -> "FakeQuery":
        self._limit = n
        return self

    @staticmethod
    def _matches(data: dict[str, Any], field: str, op: str, value: Any) -> bool:
        actual = data.get(field)
        if op == "==":
            return actual == value
        if op in ("array_contains", "array-contains"):
            return isinstance(actual, list) and value in actual
        if op == "in":
            return actual in value
        raise NotImplementedError(op)

    def _results(self) -> list[tuple[str, dict[str, Any], str]]:
        rows = [
            (doc_id, data, update_time, seq)
            for doc_id, (data, update_time, seq) in self._coll.docs.items()
            if all(self._matches(data, f, op, v) for f, op, v in self._filters)
        ]
        if self._order:
            field, direction = self._order
            # Documents missing the order field are excluded, as in Firestore.
            rows = [r for r in rows if r[1].get(field) is not None]
            rows.sort(key=lambda r: (r[1][field], r[3]), reverse=direction == "DESCENDING")
        rows = rows[self._offset:]
        if self._limit:
            rows = rows[: self._limit]
        return [(doc_id, data, update_time) for doc_id, data, update_time, _ in rows]

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        for doc_id, data, update_time in self._results():
            yield DocumentSnapshot(doc_id, copy.deepcopy(data), update_time)

    async def count(self) -> int:
        return len(self._results())


class FakeCollection:
    def __init__(self) -> None:
        # doc_id -> (data, update_time, insertion sequence)
        self.docs: dict[str, tuple[dict[str, Any], str, int]] = {}
        self._seq = itertools.count()

    def write(self, doc_id: str, data: dict[str, Any]) -> None:
        seq = self.docs[doc_id][2] if doc_id in self.docs else next(self._seq)
        self.docs[doc_id] = (data, _next_update_time(), seq)

    def document(self, doc_id: str) -> FakeDocument:
        return FakeDocument(self, doc_id)

    async def create(self, doc_id: str, data: dict[str, Any]) -> None:
        if doc_id in self.docs:
            raise DocumentExistsError(doc_id)
        self.write(doc_id, copy.deepcopy(data))

    def where(self, field: str, op: str, value: Any) -> FakeQuery:
        return FakeQuery(self).where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> FakeQuery:
        return FakeQuery(self).order_by(field, direction)


class FakeFirestore:
    def __init__(self) -> None:
        self.collections: dict[str, FakeCollection] = {}

    def collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def aclose(self) -> None:
        return None


class FakeVerifier:
    """Maps opaque test tokens to identities; unknown tokens are invalid."""

    def __init__(self) -> None:
        self._identities: dict[str, VerifiedIdentity] = {}

    def register(self, token: str, subject_id: str, email: str) -> dict[str, str]:
        self._identities[token] = VerifiedIdentity(subject_id=subject_id, email=email)
        return {"Authorization": f"Bearer {token}"}

    async def verify(self, token: str) -> VerifiedIdentity:
        identity = self._identities.get(token)
        if identity is None:
            raise InvalidCredentialException("Invalid token")
        return identity
