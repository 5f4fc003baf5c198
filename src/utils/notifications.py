"""
Transient notifications.

User-visible outcomes (success, info, warning, error) are queued here
instead of being raised. Entries keep insertion order and each expires
independently after a fixed timeout.
"""

import itertools
import logging
import time
from typing import Callable

from pydantic import BaseModel

from config.settings import NOTIFICATION_TIMEOUT_SECONDS
from src.schemas.base import NotificationLevel

logger = logging.getLogger(__name__)


class Notification(BaseModel):
    id: int
    level: NotificationLevel
    message: str
    created_at: float

    def is_expired(self, now: float, timeout: float) -> bool:
        return now - self.created_at >= timeout


class NotificationQueue:
    """
    Auto-dismissing notification queue.

    Usage:
        queue = NotificationQueue()
        queue.push(NotificationLevel.SUCCESS, "Đã lưu")
        for n in queue.active():
            ...
    """

    def __init__(
        self,
        timeout: float = NOTIFICATION_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout = timeout
        self._clock = clock
        self._ids = itertools.count(1)
        self._items: list[Notification] = []

    def push(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(
            id=next(self._ids),
            level=level,
            message=message,
            created_at=self._clock(),
        )
        self._items.append(notification)
        log_level = {
            NotificationLevel.ERROR: logging.ERROR,
            NotificationLevel.WARNING: logging.WARNING,
        }.get(level, logging.INFO)
        logger.log(log_level, f"Notification [{level.value}]: {message}")
        return notification

    def success(self, message: str) -> Notification:
        return self.push(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self.push(NotificationLevel.INFO, message)

    def warning(self, message: str) -> Notification:
        return self.push(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        return self.push(NotificationLevel.ERROR, message)

    def active(self) -> list[Notification]:
        """Drop expired entries and return the rest in insertion order."""
        now = self._clock()
        self._items = [n for n in self._items if not n.is_expired(now, self.timeout)]
        return list(self._items)

    def dismiss(self, notification_id: int) -> None:
        self._items = [n for n in self._items if n.id != notification_id]

    def __len__(self) -> int:
        return len(self._items)
