"""Application lifespan: startup and shutdown.

Wiring only: shared HTTP client, capabilities (record store, verifier,
optional integrations) and the keep-alive scheduler. A record store that
cannot be configured aborts startup.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from sopdesk.core.capabilities import build_capabilities
from sopdesk.core.config import get_settings
from sopdesk.infrastructure.background import KeepAliveScheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: shared HTTP client, capabilities, keep-alive.
    Shutdown order: keep-alive, record store client, shared HTTP client.
    """
    settings = get_settings()

    # ---- Startup ----
    # Shared HTTP client for key fetches, gateway and rendering calls (connection reuse).
    app.state.http_client = httpx.AsyncClient(timeout=30.0)
    try:
        caps, store = build_capabilities(settings, app.state.http_client)
    except Exception:
        logger.critical("Startup aborted: record store configuration failed")
        await app.state.http_client.aclose()
        raise
    app.state.capabilities = caps
    app.state.firestore = store

    app.state.keep_alive = None
    if settings.server_url:
        keep_alive = KeepAliveScheduler(
            app.state.http_client,
            settings.server_url,
            interval_minutes=settings.keep_alive_interval_minutes,
        )
        keep_alive.start()
        app.state.keep_alive = keep_alive

    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    if app.state.keep_alive is not None:
        app.state.keep_alive.shutdown()
        app.state.keep_alive = None

    if getattr(app.state, "firestore", None) is not None:
        await app.state.firestore.aclose()
        app.state.firestore = None
        logger.info("Firestore client closed")

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("Shared HTTP client closed")
