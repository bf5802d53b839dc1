"""Notification backends and the enabled-flag gate."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod

from lockin.exceptions import NotificationError
from lockin.store import keys
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)


class BaseNotifier(ABC):
    """Abstract notification surface. Fire-and-forget."""

    @abstractmethod
    def notify(self, title: str, body: str) -> None:
        """Show a notification; raise NotificationError on delivery failure."""
        ...


class LogNotifier(BaseNotifier):
    """Writes notifications to the log. Keeps a history for inspection."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))
        logger.info("Notification: %s - %s", title, body)


def _sanitize_applescript(text: str) -> str:
    """Sanitize a string for safe inclusion in AppleScript double-quoted strings."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


class OsascriptNotifier(BaseNotifier):
    """macOS Notification Center via ``osascript``."""

    def __init__(self, timeout: int = 10):
        self.timeout = timeout

    def notify(self, title: str, body: str) -> None:
        script = (
            f'display notification "{_sanitize_applescript(body)}" '
            f'with title "{_sanitize_applescript(title)}"'
        )
        try:
            result = subprocess.run(
                ["osascript", "-e", script],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise NotificationError(f"osascript timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise NotificationError("osascript not found - this notifier requires macOS") from e
        if result.returncode != 0:
            raise NotificationError(f"osascript failed: {result.stderr.strip()}")


class Notifications:
    """Dispatches to a backend unless the user disabled notifications."""

    def __init__(self, store: BaseStore, backend: BaseNotifier):
        self.store = store
        self.backend = backend

    def enabled(self) -> bool:
        return bool(self.store.get(keys.NOTIFICATIONS_ENABLED, True))

    def set_enabled(self, enabled: bool) -> None:
        self.store.set(keys.NOTIFICATIONS_ENABLED, bool(enabled))

    def notify(self, title: str, body: str) -> bool:
        """Returns True if the notification was handed to the backend."""
        if not self.enabled():
            logger.debug("Notifications disabled, dropping %r", title)
            return False
        try:
            self.backend.notify(title, body)
        except NotificationError as e:
            logger.warning("Notification %r not delivered: %s", title, e)
            return False
        return True
