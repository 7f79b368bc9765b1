"""Background jobs (APScheduler)."""

from sopdesk.infrastructure.background.keep_alive import KeepAliveScheduler

__all__ = ["KeepAliveScheduler"]
