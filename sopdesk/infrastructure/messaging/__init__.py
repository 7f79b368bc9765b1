"""Messaging: in-process domain event bus and its subscribers."""

from sopdesk.infrastructure.messaging.event_bus import (
    DomainEvent,
    EventBus,
    SystemLogRecorder,
    log_event,
)

__all__ = ["DomainEvent", "EventBus", "SystemLogRecorder", "log_event"]
