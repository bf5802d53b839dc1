"""Attribute active-attention time to one destination at a time."""

from __future__ import annotations

import logging
import time
from typing import Callable
from urllib.parse import urlparse

from lockin.store.base import BaseStore
from lockin.tracking.ledger import add_seconds
from lockin.tracking.models import TrackingCursor, day_key

logger = logging.getLogger(__name__)

_TRACKED_SCHEMES = {"http", "https"}


def tracked_hostname(url: str | None) -> str | None:
    """Hostname of an http(s) URL, or None for anything else."""
    if not url:
        return None
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None
    if parsed.scheme not in _TRACKED_SCHEMES:
        return None
    return parsed.hostname or None


class AttentionTracker:
    """Owns the in-memory TrackingCursor and flushes it into the usage ledger.

    The cursor is never persisted. ``on_tick`` re-flushes an open cursor once
    it has run for ``cadence_seconds``, so an unclean exit loses at most one
    cadence interval.
    """

    def __init__(
        self,
        store: BaseStore,
        clock: Callable[[], float] = time.time,
        max_interval_seconds: int = 7200,
        cadence_seconds: int = 10,
    ):
        self.store = store
        self.clock = clock
        self.max_interval_seconds = max_interval_seconds
        self.cadence_seconds = cadence_seconds
        self.cursor = TrackingCursor()

    def on_focus_change(self, url: str | None) -> str | None:
        """Flush the current cursor, then start attributing to ``url`` if it is http(s).

        Returns the hostname now being tracked, if any.
        """
        self.record_elapsed()
        hostname = tracked_hostname(url)
        if hostname:
            self.cursor.open(hostname, self.clock())
            logger.debug("Tracking %s", hostname)
        return hostname

    def on_focus_lost(self) -> None:
        self.record_elapsed()

    def on_tick(self) -> bool:
        """Flush and reopen the cursor once it reaches the cadence. Returns True if flushed."""
        if not self.cursor.active:
            return False
        if self.clock() - self.cursor.started_at < self.cadence_seconds:
            return False
        hostname = self.cursor.hostname
        self.record_elapsed()
        self.cursor.open(hostname, self.clock())
        return True

    def record_elapsed(self) -> int:
        """Charge the open interval to its hostname and clear the cursor.

        Intervals outside ``(0, max_interval_seconds)`` are discarded, not
        clamped. Returns the whole seconds recorded.
        """
        if not self.cursor.active:
            self.cursor.close()
            return 0

        hostname = self.cursor.hostname
        now = self.clock()
        elapsed = now - self.cursor.started_at
        try:
            if not 0 < elapsed < self.max_interval_seconds:
                logger.debug("Discarding %.1fs interval for %s", elapsed, hostname)
                return 0
            seconds = int(elapsed)
            if seconds == 0:
                return 0
            add_seconds(self.store, day_key(now), hostname, seconds)
            return seconds
        finally:
            self.cursor.close()
