"""Transient operator notifications (toasts) raised by the controllers."""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 50


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """One message shown to the operator."""

    kind: NotificationKind
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """Queues notifications until the presentation layer drains them."""

    def __init__(self, max_pending: int = DEFAULT_MAX_PENDING) -> None:
        self._pending: deque[Notification] = deque(maxlen=max_pending)

    def success(self, message: str) -> None:
        self._push(Notification(NotificationKind.SUCCESS, message))

    def error(self, message: str) -> None:
        self._push(Notification(NotificationKind.ERROR, message))

    def _push(self, notification: Notification) -> None:
        logger.debug(f"Notify [{notification.kind.value}] {notification.message}")
        self._pending.append(notification)

    def pending(self) -> list[Notification]:
        """Notifications not yet drained, oldest first."""
        return list(self._pending)

    def drain(self) -> list[Notification]:
        """Return and clear pending notifications."""
        drained = list(self._pending)
        self._pending.clear()
        return drained
