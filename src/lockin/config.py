"""Runtime settings read from LOCKIN_* environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".lockin" / "lockin.db"
DEFAULT_BLOCKED_PAGE = "lockin://blocked"


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %d", name, raw, default)
        return default
    return value


@dataclass
class Settings:
    """Agent configuration.

    Args:
        db_path: SQLite file backing the persistent store.
        tick_seconds: Cadence of the attribution re-flush and alarm polling.
        retention_days: Days of usage history kept by the retention sweep.
        max_interval_seconds: Attribution intervals at or above this are discarded.
        blocked_page: Redirect target for blocked destinations.
        engine_url: Base URL of an HTTP redirect engine; None uses the in-memory engine.
        notifier: ``"log"`` or ``"osascript"``.
        log_level: Level name passed to ``logging.basicConfig`` by the CLI.
    """

    db_path: Path = DEFAULT_DB_PATH
    tick_seconds: int = 10
    retention_days: int = 30
    max_interval_seconds: int = 7200
    blocked_page: str = DEFAULT_BLOCKED_PAGE
    engine_url: str | None = None
    notifier: str = "log"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        db_path = os.environ.get("LOCKIN_DB_PATH")
        notifier = os.environ.get("LOCKIN_NOTIFIER", "log").strip().lower()
        if notifier not in {"log", "osascript"}:
            logger.warning("Unknown LOCKIN_NOTIFIER=%r, falling back to 'log'", notifier)
            notifier = "log"
        return cls(
            db_path=Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH,
            tick_seconds=_int_env("LOCKIN_TICK_SECONDS", 10),
            retention_days=_int_env("LOCKIN_RETENTION_DAYS", 30),
            max_interval_seconds=_int_env("LOCKIN_MAX_INTERVAL_SECONDS", 7200),
            blocked_page=os.environ.get("LOCKIN_BLOCKED_PAGE") or DEFAULT_BLOCKED_PAGE,
            engine_url=os.environ.get("LOCKIN_ENGINE_URL") or None,
            notifier=notifier,
            log_level=os.environ.get("LOCKIN_LOG_LEVEL", "INFO").upper(),
        )
