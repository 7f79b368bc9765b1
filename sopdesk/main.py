"""ASGI application for sopdesk.

`app` is what uvicorn serves (see sopdesk.__main__). create_app() only
assembles pieces defined elsewhere: the lifespan builds the capabilities,
the v1 router carries every endpoint.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from sopdesk.api.v1 import api_router
from sopdesk.core.config import get_settings
from sopdesk.core.exception_handlers import register_exception_handlers
from sopdesk.core.lifespan import create_lifespan
from sopdesk.core.limiter import limiter
from sopdesk.middleware import RequestIDMiddleware, TimeoutMiddleware
from sopdesk.pages import render_root_page
from sopdesk.schemas.health import PingResponse
from sopdesk.shared.telemetry import setup_logging


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging()
    origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # First added = innermost. Order (outer to inner): timeout, request ID, CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    def landing_page() -> HTMLResponse:
        return HTMLResponse(content=render_root_page(settings.app_name, settings.app_version))

    @app.get("/ping", response_model=PingResponse, tags=["health"])
    def ping() -> PingResponse:
        """Keep-alive target."""
        return PingResponse()

    return app


app = create_app()
