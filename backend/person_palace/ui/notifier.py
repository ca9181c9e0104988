"""
Transient user notifications (toasts). The page gets a Notifier injected;
rendering the toast is up to the presentation layer.
"""

import logging
from typing import Literal, Protocol

from pydantic import BaseModel

logger = logging.getLogger(__name__)

NotificationVariant = Literal["default", "destructive"]


class Notification(BaseModel):
    title: str
    description: str
    variant: NotificationVariant = "default"


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class LoggingNotifier:
    """Notifier that writes every notification to the log."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def notify(self, notification: Notification) -> None:
        level = logging.ERROR if notification.variant == "destructive" else logging.INFO
        self._log.log(level, "%s %s", notification.title, notification.description)
