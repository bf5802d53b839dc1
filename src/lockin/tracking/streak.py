"""Consecutive-day usage streak."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from lockin.store import keys
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)


class StreakTracker:
    def __init__(self, store: BaseStore):
        self.store = store

    def current(self) -> int:
        return int(self.store.get(keys.STREAK, 0) or 0)

    def touch(self, today: date) -> int:
        """Record activity on ``today`` and return the updated streak."""
        last_raw = self.store.get(keys.LAST_VISIT_DATE)
        streak = self.current()
        try:
            last = date.fromisoformat(last_raw) if last_raw else None
        except (TypeError, ValueError):
            last = None

        if last == today:
            return streak
        if last is not None and last == today - timedelta(days=1):
            streak += 1
        else:
            streak = 1

        self.store.set(keys.STREAK, streak)
        self.store.set(keys.LAST_VISIT_DATE, today.isoformat())
        logger.info("Streak is now %d day(s)", streak)
        return streak
