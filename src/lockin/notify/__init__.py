"""Notification surface."""

from lockin.notify.notifier import (
    BaseNotifier,
    LogNotifier,
    Notifications,
    OsascriptNotifier,
)

__all__ = [
    "BaseNotifier",
    "LogNotifier",
    "Notifications",
    "OsascriptNotifier",
]
