"""Tests for notification backends and the enabled gate."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from lockin.exceptions import NotificationError
from lockin.notify.notifier import (
    LogNotifier,
    Notifications,
    OsascriptNotifier,
    _sanitize_applescript,
)


def test_sanitize_applescript():
    assert _sanitize_applescript('hello "world"') == 'hello \\"world\\"'
    assert _sanitize_applescript("back\\slash") == "back\\\\slash"


def test_enabled_by_default(store):
    backend = LogNotifier()
    notifications = Notifications(store, backend)
    assert notifications.notify("Title", "Body") is True
    assert backend.sent == [("Title", "Body")]


def test_disabled_drops(store):
    backend = LogNotifier()
    notifications = Notifications(store, backend)
    notifications.set_enabled(False)
    assert notifications.notify("Title", "Body") is False
    assert backend.sent == []


def test_backend_failure_is_not_raised(store):
    backend = MagicMock()
    backend.notify.side_effect = NotificationError("boom")
    assert Notifications(store, backend).notify("T", "B") is False


@patch("lockin.notify.notifier.subprocess.run")
def test_osascript_success(mock_run):
    mock_run.return_value = MagicMock(returncode=0)
    OsascriptNotifier().notify('Done "now"', "Body")
    args = mock_run.call_args[0][0]
    assert args[0] == "osascript"
    assert 'with title "Done \\"now\\""' in args[2]


@patch("lockin.notify.notifier.subprocess.run")
def test_osascript_failure(mock_run):
    mock_run.return_value = MagicMock(returncode=1, stderr="denied")
    with pytest.raises(NotificationError, match="denied"):
        OsascriptNotifier().notify("T", "B")


@patch("lockin.notify.notifier.subprocess.run", side_effect=FileNotFoundError())
def test_osascript_missing(mock_run):
    with pytest.raises(NotificationError, match="requires macOS"):
        OsascriptNotifier().notify("T", "B")


@patch(
    "lockin.notify.notifier.subprocess.run",
    side_effect=subprocess.TimeoutExpired(cmd="osascript", timeout=10),
)
def test_osascript_timeout(mock_run):
    with pytest.raises(NotificationError, match="timed out"):
        OsascriptNotifier().notify("T", "B")
