"""Data models for attention tracking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class TrackingCursor:
    """The destination currently being attributed. Both fields set, or neither."""

    hostname: str | None = None
    started_at: float | None = None

    @property
    def active(self) -> bool:
        return self.hostname is not None and self.started_at is not None

    def open(self, hostname: str, now: float) -> None:
        self.hostname = hostname
        self.started_at = now

    def close(self) -> None:
        self.hostname = None
        self.started_at = None


def day_key(ts: float) -> str:
    """Local calendar day for a Unix timestamp, as ``YYYY-MM-DD``."""
    return datetime.fromtimestamp(ts).date().isoformat()


def day_keys_back(today: date, days: int) -> list[str]:
    """``days`` day keys ending at ``today``, oldest first."""
    return [date.fromordinal(today.toordinal() - offset).isoformat() for offset in range(days - 1, -1, -1)]
