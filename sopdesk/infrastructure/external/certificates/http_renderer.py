"""Certificate rendering via an external HTTP service.

The service renders a completion certificate (employee name + SOP title)
and responds with {"url": "<download url>"}.
"""

from __future__ import annotations

import logging
from datetime import datetime

import httpx

from sopdesk.domain.exceptions import UpstreamFailureException

logger = logging.getLogger(__name__)


class HttpCertificateRenderer:
    """Implements ICertificateRenderer against a configured rendering endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        service_url: str,
        *,
        timeout_seconds: float = 20.0,
    ) -> None:
        self._http = http_client
        self._service_url = service_url
        self._timeout = timeout_seconds

    async def render(
        self,
        employee_name: str,
        sop_title: str,
        completed_at: datetime,
        reference: str,
    ) -> str:
        body = {
            "employee_name": employee_name,
            "sop_title": sop_title,
            "completed_at": completed_at.isoformat(),
            "reference": reference,
        }
        try:
            resp = await self._http.post(self._service_url, json=body, timeout=self._timeout)
            resp.raise_for_status()
            url = resp.json().get("url")
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Certificate rendering failed: reference=%s error=%s", reference, e)
            raise UpstreamFailureException("certificates") from e
        if not url:
            raise UpstreamFailureException("certificates", "response had no url")
        return str(url)
