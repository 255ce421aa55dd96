"""User-facing notifications raised by one-shot actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional


class AlertLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: AlertLevel
    message: str
    channel: str = "general"


NotificationListener = Callable[[Notification], None]


class NotificationCenter:
    """Collects dismissible notifications and forwards them to listeners."""

    def __init__(self, logger_obj: Optional[logging.Logger] = None):
        self.logger = logger_obj or logging.getLogger(__name__)
        self._notifications: List[Notification] = []
        self._listeners: List[NotificationListener] = []

    def subscribe(self, listener: NotificationListener) -> None:
        self._listeners.append(listener)

    def notify(self, level: AlertLevel, message: str, channel: str = "general") -> Notification:
        notification = Notification(level=level, message=message, channel=channel)
        self._notifications.append(notification)
        for listener in self._listeners:
            listener(notification)
        return notification

    def success(self, message: str, channel: str = "general") -> Notification:
        return self.notify(AlertLevel.SUCCESS, message, channel)

    def info(self, message: str, channel: str = "general") -> Notification:
        return self.notify(AlertLevel.INFO, message, channel)

    def error(self, message: str, channel: str = "general") -> Notification:
        self.logger.warning(f"[{channel}] {message}")
        return self.notify(AlertLevel.ERROR, message, channel)

    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    def by_level(self, level: AlertLevel) -> List[Notification]:
        return [n for n in self._notifications if n.level == level]

    def dismiss_all(self) -> None:
        self._notifications.clear()
