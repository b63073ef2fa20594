from __future__ import annotations

import logging
from typing import Protocol

from .model import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Fire-and-forget acceptance of notification events."""

    def emit(self, event: NotificationEvent) -> None:
        raise NotImplementedError


class LoggingNotificationSink(NotificationSink):
    """Sink used when no delivery backend is configured."""

    def emit(self, event: NotificationEvent) -> None:
        logger.info(
            "notification %s -> %s: %s",
            event.event_type.value,
            ",".join(str(r) for r in event.recipient_ids) or "-",
            event.title,
        )


def safe_emit(sink: NotificationSink, event: NotificationEvent) -> None:
    """Emit without ever failing the attendance operation that triggered it."""

    if not event.recipient_ids:
        return
    try:
        sink.emit(event)
    except Exception:
        logger.exception(
            "Failed to emit %s notification (attendance_id=%s)",
            event.event_type.value,
            event.attendance_id,
        )
