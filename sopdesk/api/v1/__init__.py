"""API v1: versioned HTTP routes."""

from sopdesk.api.v1.router import api_router

__all__ = ["api_router"]
