"""Daily compaction of the usage ledger."""

from __future__ import annotations

import logging
import re
import time
from datetime import date, datetime, timedelta
from typing import Callable

import dateutil.parser as parser

from lockin.exceptions import StoreError
from lockin.store import keys
from lockin.store.base import BaseStore
from lockin.tracking.ledger import load_ledger

logger = logging.getLogger(__name__)

# ``Date.toDateString()`` form found in older backups, e.g. ``Sun Oct 18 2026``.
_LEGACY_DAY_RE = re.compile(r"^[A-Z][a-z]{2} [A-Z][a-z]{2} \d{2} \d{4}$")


def _parse_day(key: str) -> date | None:
    """ISO ``YYYY-MM-DD`` keys, or the legacy form; anything else is None."""
    try:
        return date.fromisoformat(key)
    except (TypeError, ValueError):
        pass
    if not isinstance(key, str) or not _LEGACY_DAY_RE.match(key):
        return None
    try:
        return parser.parse(key).date()
    except (ValueError, OverflowError):
        return None


class RetentionSweep:
    """Drops ledger days strictly older than ``retention_days`` before today."""

    def __init__(
        self,
        store: BaseStore,
        clock: Callable[[], float] = time.time,
        retention_days: int = 30,
    ):
        self.store = store
        self.clock = clock
        self.retention_days = retention_days

    def run(self) -> list[str]:
        """Returns the removed day keys. Store faults leave the ledger unchanged."""
        cutoff = (datetime.fromtimestamp(self.clock()) - timedelta(days=self.retention_days)).date()
        try:
            ledger = load_ledger(self.store)
            removed = []
            for key in list(ledger):
                day = _parse_day(key)
                if day is None:
                    logger.warning("Keeping usage entry with unparseable day key %r", key)
                    continue
                if day < cutoff:
                    removed.append(key)
                    del ledger[key]
            if removed:
                self.store.set(keys.SITE_USAGE, ledger)
        except StoreError as e:
            logger.warning("Retention sweep skipped: %s", e)
            return []

        if removed:
            logger.info("Retention sweep removed %d day(s) before %s", len(removed), cutoff)
        return removed
