"""Async Firestore client over the REST v1 API.

Service-account credentials come from google-auth; every call goes through
one shared httpx.AsyncClient. Besides plain document reads and writes the
client offers the two atomic primitives the repositories depend on:

- update(..., expected_update_time=...) only applies when the document is
  unchanged since the snapshot that carried that update time;
- array_union(...) appends values not yet present (appendMissingElements)
  and array_remove(...) drops values (removeAllFromArray),
  so concurrent array edits never lose each other.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

import httpx

from sopdesk.infrastructure.firebase._rest_encoding import (
    decode_document,
    encode_document,
    to_firestore_value,
)

FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
FIRESTORE_API = "https://firestore.googleapis.com/v1"


def service_account_credentials(key_dict: dict, scopes: list[str] | None = None):
    """google.oauth2 service account credentials for the given scopes (Firestore by default)."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=scopes or [FIRESTORE_SCOPE]
    )


def fresh_access_token(credentials) -> str:
    """Return a valid bearer token, refreshing the credentials when needed (blocking)."""
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


class DocumentExistsError(Exception):
    """Create was refused because a document with that id already exists."""


class PreconditionFailedError(Exception):
    """A write precondition (document exists / unchanged since updateTime) did not hold."""


@dataclass(frozen=True)
class DocumentSnapshot:
    """Document id, decoded fields and the server's last update time."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)
    update_time: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return dict(self.data)

    @classmethod
    def from_rest(cls, document: dict[str, Any]) -> "DocumentSnapshot":
        return cls(
            document.get("name", "").rsplit("/", 1)[-1],
            decode_document(document.get("fields")),
            document.get("updateTime"),
        )


class FirestoreRESTClient:
    """Entry point: collection(...) returns references bound to this client."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.project_id = project_id
        self.documents_root = f"projects/{project_id}/databases/(default)/documents"
        self._credentials = credentials
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=30.0)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()

    async def _token(self) -> str:
        # google-auth refresh is synchronous; keep it off the event loop.
        return await asyncio.to_thread(fresh_access_token, self._credentials)

    async def call(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: list[tuple[str, str]] | None = None,
    ) -> Any:
        """Issue one REST call relative to the v1 API root.

        Returns the decoded JSON body ({} when empty) or None on 404.
        Raises DocumentExistsError on 409 and PreconditionFailedError when
        the server reports FAILED_PRECONDITION; other errors propagate as
        httpx.HTTPStatusError.
        """
        resp = await self._http.request(
            method,
            f"{FIRESTORE_API}/{path}",
            json=body,
            params=params,
            headers={"Authorization": f"Bearer {await self._token()}"},
        )
        if resp.status_code == 404:
            return None
        if resp.status_code == 409:
            raise DocumentExistsError(path)
        if resp.status_code == 400 and b"FAILED_PRECONDITION" in resp.content:
            raise PreconditionFailedError(path)
        resp.raise_for_status()
        return resp.json() if resp.content else {}

    def collection(self, collection_id: str) -> "CollectionReference":
        return CollectionReference(self, f"{self.documents_root}/{collection_id}")


class DocumentReference:
    def __init__(self, client: FirestoreRESTClient, path: str) -> None:
        self._client = client
        self.path = path
        self.id = path.rsplit("/", 1)[-1]

    async def get(self) -> DocumentSnapshot | None:
        document = await self._client.call("GET", self.path)
        return DocumentSnapshot.from_rest(document) if document else None

    async def set(self, data: dict[str, Any]) -> None:
        """Create or fully replace the document."""
        await self._client.call("PATCH", self.path, body=encode_document(data))

    async def update(
        self,
        data: dict[str, Any],
        *,
        expected_update_time: str | None = None,
    ) -> bool:
        """Write only the given top-level fields of an existing document.

        Returns False if the document does not exist. With
        expected_update_time the write is conditional on the document being
        unchanged since that snapshot, else PreconditionFailedError.
        """
        params = [("updateMask.fieldPaths", name) for name in data]
        if expected_update_time:
            params.append(("currentDocument.updateTime", expected_update_time))
        else:
            params.append(("currentDocument.exists", "true"))
        try:
            result = await self._client.call(
                "PATCH", self.path, body=encode_document(data), params=params
            )
        except PreconditionFailedError:
            if expected_update_time:
                raise
            return False
        return result is not None

    async def array_union(self, field_path: str, values: list[Any]) -> bool:
        """Atomically append the values missing from an array field.

        Returns False if the document does not exist.
        """
        return await self._transform(field_path, "appendMissingElements", values)

    async def array_remove(self, field_path: str, values: list[Any]) -> bool:
        """Atomically remove every occurrence of the values from an array field.

        Returns False if the document does not exist.
        """
        return await self._transform(field_path, "removeAllFromArray", values)

    async def _transform(self, field_path: str, kind: str, values: list[Any]) -> bool:
        write = {
            "transform": {
                "document": self.path,
                "fieldTransforms": [
                    {
                        "fieldPath": field_path,
                        kind: {"values": [to_firestore_value(v) for v in values]},
                    }
                ],
            },
            "currentDocument": {"exists": True},
        }
        try:
            result = await self._client.call(
                "POST", f"{self._client.documents_root}:commit", body={"writes": [write]}
            )
        except PreconditionFailedError:
            return False
        return result is not None

    async def delete(self) -> None:
        """Delete the document; deleting a missing document is a no-op."""
        await self._client.call("DELETE", self.path)


_OPERATORS: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains": "ARRAY_CONTAINS",
    "array_contains_any": "ARRAY_CONTAINS_ANY",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}


def _field_filter(field_path: str, op: str, value: Any) -> dict[str, Any]:
    if op not in _OPERATORS:
        raise ValueError(f"Unsupported query operator: {op!r}")
    return {
        "fieldFilter": {
            "field": {"fieldPath": field_path},
            "op": _OPERATORS[op],
            "value": to_firestore_value(value),
        }
    }


class Query:
    """Chainable structured query over one collection. Filters are ANDed."""

    def __init__(self, client: FirestoreRESTClient, parent: str, collection_id: str) -> None:
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[dict[str, Any]] = []
        self._order: list[dict[str, Any]] = []
        self._offset = 0
        self._limit: int | None = None

    def where(self, field_path: str, op: str, value: Any) -> "Query":
        self._filters.append(_field_filter(field_path, op, value))
        return self

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> "Query":
        self._order = [{"field": {"fieldPath": field_path}, "direction": direction}]
        return self

    def offset(self, n: int) -> "Query":
        self._offset = n
        return self

    def limit(self, n: int) -> "Query":
        self._limit = n
        return self

    def to_structured_query(self) -> dict[str, Any]:
        query: dict[str, Any] = {"from": [{"collectionId": self._collection_id}]}
        if len(self._filters) == 1:
            query["where"] = self._filters[0]
        elif self._filters:
            query["where"] = {"compositeFilter": {"op": "AND", "filters": self._filters}}
        if self._order:
            query["orderBy"] = self._order
        if self._offset:
            query["offset"] = self._offset
        if self._limit:
            query["limit"] = self._limit
        return query

    async def _run(self, method: str, body: dict[str, Any]) -> list[dict[str, Any]]:
        result = await self._client.call("POST", f"{self._parent}:{method}", body=body)
        if not result:
            return []
        return result if isinstance(result, list) else [result]

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        rows = await self._run("runQuery", {"structuredQuery": self.to_structured_query()})
        for row in rows:
            if "document" in row:
                yield DocumentSnapshot.from_rest(row["document"])

    async def count(self) -> int:
        """Server-side COUNT aggregation over the matching documents."""
        rows = await self._run(
            "runAggregationQuery",
            {
                "structuredAggregationQuery": {
                    "structuredQuery": self.to_structured_query(),
                    "aggregations": [{"alias": "n", "count": {}}],
                }
            },
        )
        for row in rows:
            counted = row.get("result", {}).get("aggregateFields", {}).get("n")
            if counted is not None:
                return int(counted.get("integerValue", 0))
        return 0


class CollectionReference:
    def __init__(self, client: FirestoreRESTClient, path: str) -> None:
        self._client = client
        self.path = path.rstrip("/")
        self._parent, _, self.id = self.path.rpartition("/")

    def document(self, document_id: str) -> DocumentReference:
        return DocumentReference(self._client, f"{self.path}/{document_id}")

    async def create(self, document_id: str, data: dict[str, Any]) -> None:
        """Create the document under the given id; DocumentExistsError if taken."""
        await self._client.call(
            "POST",
            self.path,
            body=encode_document(data),
            params=[("documentId", document_id)],
        )

    def _query(self) -> Query:
        return Query(self._client, self._parent, self.id)

    def where(self, field_path: str, op: str, value: Any) -> Query:
        return self._query().where(field_path, op, value)

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> Query:
        return self._query().order_by(field_path, direction)
