"""In-process domain event bus.

Use cases publish tenant-keyed events (e.g. "sop:completed"); subscribers
record them in the system log or forward them elsewhere. Each subscriber
runs in isolation: a failing subscriber is logged and never affects the
request that published the event or the other subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sopdesk.domain.enums import LogType
from sopdesk.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from sopdesk.application.interfaces.repositories import ISystemLogRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DomainEvent:
    owner_id: str
    event_type: str
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=utc_now)


Subscriber = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """Implements IEventPublisher with per-subscriber failure isolation."""

    def __init__(self, subscribers: list[Subscriber] | None = None) -> None:
        self._subscribers: list[Subscriber] = list(subscribers or [])

    def subscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.append(subscriber)

    async def publish(
        self, owner_id: str, event_type: str, payload: dict[str, Any] | None = None
    ) -> None:
        event = DomainEvent(owner_id=owner_id, event_type=event_type, payload=payload or {})
        for subscriber in self._subscribers:
            try:
                await subscriber(event)
            except Exception:
                logger.exception(
                    "Event subscriber failed: event=%s owner_id=%s subscriber=%r",
                    event_type,
                    owner_id,
                    subscriber,
                )


# Human-readable audit messages; missing payload keys fall back to "?".
_LOG_MESSAGES: dict[str, str] = {
    "admin:registered": "Admin registered: {email}",
    "employee:created": "Employee added: {name}",
    "employee:updated": "Employee updated: {name}",
    "employee:deleted": "Employee removed: {name}",
    "sop:created": "SOP created: {title}",
    "sop:updated": "SOP updated: {title}",
    "sop:cleared": "SOP content cleared: {title}",
    "sop:deleted": "SOP deleted: {title}",
    "sop:completed": "SOP completed: {title} by {employee_name}",
    "training:created": "Training created: {title}",
    "training:deleted": "Training deleted: {title}",
    "training:completed": "Training completed: {title}",
    "subscription:activated": "Subscription activated: {plan_id}",
}


class _Defaulting(dict):
    def __missing__(self, key: str) -> str:
        return "?"


class SystemLogRecorder:
    """Subscriber that appends one system log entry per event."""

    def __init__(self, log_repo: "ISystemLogRepository") -> None:
        self._log_repo = log_repo

    async def __call__(self, event: DomainEvent) -> None:
        template = _LOG_MESSAGES.get(event.event_type, event.event_type)
        message = template.format_map(_Defaulting(event.payload))
        log_type = LogType.ERROR if event.event_type.endswith(":failed") else LogType.INFO
        await self._log_repo.append(event.owner_id, message, log_type)


async def log_event(event: DomainEvent) -> None:
    """Subscriber that writes events to the application log."""
    logger.info("event=%s owner_id=%s", event.event_type, event.owner_id)
