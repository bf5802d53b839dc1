"""Wake-up scheduler: named alarms at absolute timestamps, persisted across restarts."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from lockin.store import keys
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)


@dataclass
class Alarm:
    """A pending alarm. ``fire_at`` is a Unix timestamp in seconds."""

    name: str
    fire_at: float
    period_minutes: int | None = None

    def to_dict(self) -> dict:
        return {"fireAt": self.fire_at, "periodMinutes": self.period_minutes}

    @classmethod
    def from_dict(cls, name: str, raw: dict) -> Alarm:
        period = raw.get("periodMinutes")
        return cls(
            name=name,
            fire_at=float(raw["fireAt"]),
            period_minutes=int(period) if period else None,
        )


class BaseScheduler(ABC):
    """Abstract interface for a wake-up scheduler."""

    @abstractmethod
    def schedule(self, name: str, fire_at: float, period_minutes: int | None = None) -> None:
        """Register ``name`` to fire at-or-after ``fire_at``, replacing any existing alarm."""
        ...

    @abstractmethod
    def cancel(self, name: str) -> bool:
        """Cancel ``name``. Returns True if an alarm was pending."""
        ...

    @abstractmethod
    def get(self, name: str) -> Alarm | None:
        """The pending alarm under ``name``, if any."""
        ...

    @abstractmethod
    def pop_due(self, now: float) -> list[str]:
        """Names of alarms due at ``now``, in firing order.

        One-shot alarms are removed; periodic alarms are advanced past ``now``.
        """
        ...


class StoreScheduler(BaseScheduler):
    """Scheduler whose alarm table lives in the persistent store.

    Alarms survive process restarts because nothing is held in memory;
    the host is expected to call ``pop_due`` on every tick and on startup.
    """

    def __init__(self, store: BaseStore):
        self.store = store

    def _load(self) -> dict[str, Alarm]:
        raw = self.store.get(keys.ALARMS) or {}
        alarms: dict[str, Alarm] = {}
        for name, entry in raw.items():
            try:
                alarms[name] = Alarm.from_dict(name, entry)
            except (KeyError, TypeError, ValueError):
                logger.warning("Dropping malformed alarm %r: %r", name, entry)
        return alarms

    def _save(self, alarms: dict[str, Alarm]) -> None:
        self.store.set(keys.ALARMS, {name: a.to_dict() for name, a in alarms.items()})

    def schedule(self, name: str, fire_at: float, period_minutes: int | None = None) -> None:
        alarms = self._load()
        alarms[name] = Alarm(name=name, fire_at=fire_at, period_minutes=period_minutes)
        self._save(alarms)
        logger.debug("Scheduled alarm %s at %.3f (period=%s)", name, fire_at, period_minutes)

    def cancel(self, name: str) -> bool:
        alarms = self._load()
        if name not in alarms:
            return False
        del alarms[name]
        self._save(alarms)
        logger.debug("Cancelled alarm %s", name)
        return True

    def get(self, name: str) -> Alarm | None:
        return self._load().get(name)

    def pop_due(self, now: float) -> list[str]:
        alarms = self._load()
        due = sorted(
            (a for a in alarms.values() if a.fire_at <= now),
            key=lambda a: a.fire_at,
        )
        if not due:
            return []

        for alarm in due:
            if alarm.period_minutes:
                period = alarm.period_minutes * 60
                # A periodic alarm missed several times while suspended fires once.
                while alarm.fire_at <= now:
                    alarm.fire_at += period
            else:
                del alarms[alarm.name]
        self._save(alarms)
        return [a.name for a in due]
