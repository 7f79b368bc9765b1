"""Request ID middleware.

Forwards a client-supplied request id when it is safe to log, otherwise
generates one. The id is returned on the response, stored on
request.state and bound to the logging context for the request.
Raw ASGI (no BaseHTTPMiddleware).
"""

import re
import uuid
from typing import Callable

from sopdesk.shared.telemetry import request_id_var

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def _header(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return raw if it is a short token of [A-Za-z0-9_-]; else a fresh uuid4 hex."""
    candidate = (raw or "").strip()
    if _SAFE_ID.match(candidate):
        return candidate
    return uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header(scope, header_key))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_key, request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            request_id_var.reset(token)

    return asgi_app
