# sheet_shop/services/notifier.py

"""Toast-style user notifications for cart actions."""

import logging
from dataclasses import dataclass
from typing import Literal, Protocol

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger("sheet_shop.notifier")

NotificationLevel = Literal["success", "error"]


@dataclass(frozen=True)
class Notification:
    """A single message shown to the shopper."""

    message: str
    level: NotificationLevel = "success"


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


class LogNotifier:
    """Route notifications into the log only (headless default)."""

    def notify(self, notification: Notification) -> None:
        if notification.level == "error":
            logger.error("%s", notification.message)
        else:
            logger.info("%s", notification.message)


class ConsoleNotifier:
    """Print notifications to stderr so stdout stays clean for output."""

    _STYLES: dict[str, str] = {
        "success": "green",
        "error": "red",
    }

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def notify(self, notification: Notification) -> None:
        style = self._STYLES.get(notification.level, "")
        mark = "✓" if notification.level == "success" else "✗"
        self.console.print(
            f"[{style}]{mark} {escape(notification.message)}[/{style}]",
            highlight=False,
        )
        LogNotifier().notify(notification)

