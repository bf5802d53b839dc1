"""Export, import and validation of user data."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime

from lockin.blocking.hostnames import normalize_hostname
from lockin.exceptions import DataImportError, InvalidDestinationError
from lockin.store import keys
from lockin.store.base import BaseStore
from lockin.timer.models import MAX_DURATION_SECONDS, TimerMode

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


def export_data(store: BaseStore, now: float) -> dict:
    data = {}
    for key in keys.USER_DATA_KEYS:
        value = store.get(key)
        if value is not None:
            data[key] = value
    return {
        "version": EXPORT_VERSION,
        "exportedAt": datetime.fromtimestamp(now).isoformat(),
        "data": data,
    }


def _clean_usage(raw) -> dict[str, dict[str, int]]:
    if not isinstance(raw, dict):
        raise DataImportError("siteUsage must be an object")
    usage: dict[str, dict[str, int]] = {}
    for day, entry in raw.items():
        if not isinstance(entry, dict):
            raise DataImportError(f"siteUsage[{day!r}] must be an object")
        cleaned = {}
        for host, seconds in entry.items():
            if not isinstance(seconds, int) or isinstance(seconds, bool) or seconds < 0:
                raise DataImportError(f"siteUsage[{day!r}][{host!r}] must be a non-negative integer")
            cleaned[str(host)] = seconds
        usage[str(day)] = cleaned
    return usage


def _clean_sites(raw) -> list[str]:
    if not isinstance(raw, list):
        raise DataImportError("blockedSites must be a list")
    sites: list[str] = []
    for entry in raw:
        try:
            host = normalize_hostname(str(entry))
        except InvalidDestinationError:
            logger.warning("Skipping invalid blocked site in import: %r", entry)
            continue
        if host not in sites:
            sites.append(host)
    return sites


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_timestamp(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _clean_timer(raw) -> dict:
    if not isinstance(raw, dict):
        raise DataImportError("timerState must be an object")
    modes = {m.value for m in TimerMode}
    if not isinstance(raw.get("mode"), str) or raw["mode"] not in modes:
        raise DataImportError(f"timerState.mode must be one of {sorted(modes)}")
    remaining = raw.get("remainingSeconds")
    if not _is_count(remaining) or remaining > MAX_DURATION_SECONDS:
        raise DataImportError(
            f"timerState.remainingSeconds must be an integer in 0..{MAX_DURATION_SECONDS}"
        )
    running = raw.get("running", False)
    if not isinstance(running, bool):
        raise DataImportError("timerState.running must be a boolean")
    end_time = raw.get("endTime")
    if running and not _is_timestamp(end_time):
        raise DataImportError("a running timerState needs a numeric endTime")
    return {
        "mode": raw["mode"],
        "remainingSeconds": raw["remainingSeconds"],
        "running": running,
        "endTime": end_time if running else None,
    }


def _clean_brain_break(raw) -> dict:
    if not isinstance(raw, dict):
        raise DataImportError("brainBreak must be an object")
    active = raw.get("active", False)
    if not isinstance(active, bool):
        raise DataImportError("brainBreak.active must be a boolean")
    end_time = raw.get("endTime")
    if active and not _is_timestamp(end_time):
        raise DataImportError("an active brainBreak needs a numeric endTime")
    return {"active": active, "endTime": end_time if active else None}


def _clean_day(raw) -> str:
    try:
        return date.fromisoformat(raw).isoformat()
    except (TypeError, ValueError):
        raise DataImportError(f"lastVisitDate must be a YYYY-MM-DD date, got {raw!r}")


def _check(ok: bool, message: str, value):
    if not ok:
        raise DataImportError(message)
    return value


def import_data(store: BaseStore, payload: dict) -> list[str]:
    """Validate ``payload`` fully, then write its records. Returns the keys written."""
    if not isinstance(payload, dict):
        raise DataImportError("Backup must be an object")
    if payload.get("version") != EXPORT_VERSION:
        raise DataImportError(f"Unsupported backup version: {payload.get('version')!r}")
    data = payload.get("data")
    if not isinstance(data, dict):
        raise DataImportError("Backup has no data object")

    records = {}
    for key in keys.USER_DATA_KEYS:
        if key not in data:
            continue
        value = data[key]
        if key == keys.SITE_USAGE:
            value = _clean_usage(value)
        elif key == keys.BLOCKED_SITES:
            value = _clean_sites(value)
        elif key == keys.TIMER_STATE:
            value = _clean_timer(value)
        elif key == keys.BRAIN_BREAK:
            value = _clean_brain_break(value)
        elif key == keys.NOTIFICATIONS_ENABLED:
            value = _check(isinstance(value, bool), "notificationsEnabled must be a boolean", value)
        elif key == keys.STREAK:
            value = _check(_is_count(value), "streak must be a non-negative integer", value)
        elif key == keys.LAST_VISIT_DATE:
            value = _clean_day(value)
        records[key] = value

    for key, value in records.items():
        store.set(key, value)
    logger.info("Imported %d record(s)", len(records))
    return sorted(records)
