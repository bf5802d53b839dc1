"""Tests for environment-driven settings."""

from pathlib import Path

from lockin.config import DEFAULT_BLOCKED_PAGE, DEFAULT_DB_PATH, Settings

_VARS = [
    "LOCKIN_DB_PATH",
    "LOCKIN_TICK_SECONDS",
    "LOCKIN_RETENTION_DAYS",
    "LOCKIN_MAX_INTERVAL_SECONDS",
    "LOCKIN_BLOCKED_PAGE",
    "LOCKIN_ENGINE_URL",
    "LOCKIN_NOTIFIER",
    "LOCKIN_LOG_LEVEL",
]


def _clear(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    _clear(monkeypatch)
    settings = Settings.from_env()
    assert settings.db_path == DEFAULT_DB_PATH
    assert settings.tick_seconds == 10
    assert settings.retention_days == 30
    assert settings.max_interval_seconds == 7200
    assert settings.blocked_page == DEFAULT_BLOCKED_PAGE
    assert settings.engine_url is None
    assert settings.notifier == "log"


def test_overrides(monkeypatch, tmp_path):
    _clear(monkeypatch)
    monkeypatch.setenv("LOCKIN_DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("LOCKIN_TICK_SECONDS", "5")
    monkeypatch.setenv("LOCKIN_ENGINE_URL", "http://127.0.0.1:9000")
    monkeypatch.setenv("LOCKIN_NOTIFIER", "OSASCRIPT")
    monkeypatch.setenv("LOCKIN_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.db_path == Path(tmp_path / "x.db")
    assert settings.tick_seconds == 5
    assert settings.engine_url == "http://127.0.0.1:9000"
    assert settings.notifier == "osascript"
    assert settings.log_level == "DEBUG"


def test_invalid_values_fall_back(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("LOCKIN_TICK_SECONDS", "soon")
    monkeypatch.setenv("LOCKIN_RETENTION_DAYS", "-3")
    monkeypatch.setenv("LOCKIN_NOTIFIER", "pager")
    settings = Settings.from_env()
    assert settings.tick_seconds == 10
    assert settings.retention_days == 30
    assert settings.notifier == "log"
