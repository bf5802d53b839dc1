"""Per-day usage ledger: ``{day_key: {hostname: seconds}}`` in the store."""

from __future__ import annotations

import logging

from lockin.store import keys
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)

UsageLedger = dict[str, dict[str, int]]


def load_ledger(store: BaseStore) -> UsageLedger:
    raw = store.get(keys.SITE_USAGE)
    if not isinstance(raw, dict):
        return {}
    return raw


def add_seconds(store: BaseStore, day: str, hostname: str, seconds: int) -> int:
    """Add ``seconds`` to ``hostname`` on ``day``. Returns the new day total for it."""
    ledger = load_ledger(store)
    day_entry = ledger.setdefault(day, {})
    day_entry[hostname] = int(day_entry.get(hostname, 0)) + seconds
    store.set(keys.SITE_USAGE, ledger)
    return day_entry[hostname]
