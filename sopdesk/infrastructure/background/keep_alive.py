"""Keep-alive job: periodically GET <server_url>/ping so idle hosts stay warm."""

from __future__ import annotations

import logging

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler

logger = logging.getLogger(__name__)

KEEP_ALIVE_JOB_ID = "keep-alive-ping"


class KeepAliveScheduler:
    """Owns an AsyncIOScheduler with a single interval job. Ping failures are logged only."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        server_url: str,
        interval_minutes: int = 14,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._http = http_client
        self._ping_url = server_url.rstrip("/") + "/ping"
        self._interval_minutes = interval_minutes
        self._timeout = timeout_seconds
        self._scheduler = AsyncIOScheduler()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    async def ping(self) -> bool:
        try:
            resp = await self._http.get(self._ping_url, timeout=self._timeout)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Keep-alive ping failed: url=%s error=%s", self._ping_url, e)
            return False
        logger.debug("Keep-alive ping ok: url=%s", self._ping_url)
        return True

    def start(self) -> None:
        self._scheduler.add_job(
            self.ping,
            "interval",
            minutes=self._interval_minutes,
            id=KEEP_ALIVE_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        self._scheduler.start()
        logger.info(
            "Keep-alive scheduler started: url=%s interval_minutes=%s",
            self._ping_url,
            self._interval_minutes,
        )

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Keep-alive scheduler stopped")
