"""Read-only usage statistics over the ledger."""

from __future__ import annotations

from collections import Counter
from datetime import date

from lockin.store.base import BaseStore
from lockin.tracking.ledger import load_ledger
from lockin.tracking.models import day_keys_back


def daily_usage(store: BaseStore, day: str) -> list[tuple[str, int]]:
    """``(hostname, seconds)`` pairs for one day, most-used first."""
    entry = load_ledger(store).get(day, {})
    return sorted(entry.items(), key=lambda kv: (-kv[1], kv[0]))


def top_sites(store: BaseStore, today: date, days: int = 7, limit: int = 10) -> list[tuple[str, int]]:
    """Most-used hostnames summed over the last ``days`` days."""
    ledger = load_ledger(store)
    totals: Counter[str] = Counter()
    for key in day_keys_back(today, days):
        totals.update(ledger.get(key, {}))
    return sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))[:limit]


def weekly_totals(store: BaseStore, today: date) -> dict[str, int]:
    """Total tracked seconds per day for the last 7 days, oldest first."""
    ledger = load_ledger(store)
    return {key: sum(ledger.get(key, {}).values()) for key in day_keys_back(today, 7)}
