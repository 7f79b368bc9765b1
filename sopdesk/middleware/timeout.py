"""Request timeout middleware.

Requests running longer than the limit are cancelled and answered with 504,
unless the response has already started. Raw ASGI (no BaseHTTPMiddleware).
"""

import asyncio
import json
import logging
from typing import Callable

logger = logging.getLogger(__name__)


def _timeout_body(timeout_seconds: float) -> bytes:
    return json.dumps({
        "error": "GATEWAY_TIMEOUT",
        "message": f"Request exceeded {timeout_seconds:g}s",
        "details": {"timeout_seconds": timeout_seconds},
    }).encode()


def TimeoutMiddleware(app: Callable, timeout_seconds: float) -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        started = False

        async def tracking_send(message: dict) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, tracking_send), timeout=float(timeout_seconds))
        except asyncio.TimeoutError:
            logger.warning(
                "Request timed out: %s %s after %ss",
                scope.get("method", ""),
                scope.get("path", ""),
                timeout_seconds,
            )
            if started:
                return
            await send({
                "type": "http.response.start",
                "status": 504,
                "headers": [(b"content-type", b"application/json")],
            })
            await send({"type": "http.response.body", "body": _timeout_body(timeout_seconds)})

    return asgi_app
