"""Firebase Auth admin operations over the Identity Toolkit REST API.

Uses the same service account as Firestore (google-auth), with the
identitytoolkit scope. Used by employee creation to look up or create the
employee's sign-in identity, and to roll it back when the insert fails.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from sopdesk.domain.exceptions import UpstreamFailureException
from sopdesk.infrastructure.firebase._rest_client import (
    fresh_access_token,
    service_account_credentials,
)

logger = logging.getLogger(__name__)

_IDENTITY_SCOPE = "https://www.googleapis.com/auth/identitytoolkit"
_BASE = "https://identitytoolkit.googleapis.com/v1"


class IdentityToolkitClient:
    """Implements IManagedIdentity."""

    def __init__(
        self,
        project_id: str,
        credentials,
        http_client: httpx.AsyncClient,
        *,
        timeout_seconds: float = 15.0,
    ) -> None:
        self._accounts = f"{_BASE}/projects/{project_id}/accounts"
        self._credentials = credentials
        self._http = http_client
        self._timeout = timeout_seconds

    @classmethod
    def from_service_account(
        cls, key_dict: dict, http_client: httpx.AsyncClient
    ) -> "IdentityToolkitClient":
        return cls(
            key_dict["project_id"],
            service_account_credentials(key_dict, scopes=[_IDENTITY_SCOPE]),
            http_client,
        )

    async def _post(self, url: str, body: dict) -> dict:
        token = await asyncio.to_thread(fresh_access_token, self._credentials)
        try:
            resp = await self._http.post(
                url,
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Identity toolkit call failed: %s", e)
            raise UpstreamFailureException("identity") from e
        return resp.json() if resp.content else {}

    async def get_uid_by_email(self, email: str) -> str | None:
        data = await self._post(f"{self._accounts}:lookup", {"email": [email]})
        users = data.get("users") or []
        return users[0].get("localId") if users else None

    async def create_user(self, email: str, password: str, display_name: str) -> str:
        data = await self._post(
            self._accounts,
            {"email": email, "password": password, "displayName": display_name},
        )
        uid = data.get("localId")
        if not uid:
            raise UpstreamFailureException("identity", "create returned no localId")
        return uid

    async def delete_user(self, uid: str) -> None:
        await self._post(f"{self._accounts}:delete", {"localId": uid})
