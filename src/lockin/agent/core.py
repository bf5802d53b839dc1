"""Single-threaded dispatcher tying the background components together."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from lockin.agent import commands as cmd
from lockin.agent.data import export_data, import_data
from lockin.alarms import names
from lockin.alarms.scheduler import BaseScheduler, StoreScheduler
from lockin.blocking.brain_break import BrainBreakOverride
from lockin.blocking.denylist import Denylist
from lockin.blocking.engine import BaseRedirectEngine, HttpRedirectEngine, MemoryRedirectEngine
from lockin.blocking.synchronizer import RuleSynchronizer
from lockin.config import Settings
from lockin.exceptions import InvalidInputError, LockInError
from lockin.notify.notifier import BaseNotifier, LogNotifier, Notifications, OsascriptNotifier
from lockin.store import keys
from lockin.store.base import BaseStore
from lockin.store.sqlite import SQLiteStore
from lockin.timer.machine import TimerStateMachine
from lockin.tracking import stats
from lockin.tracking.models import day_key
from lockin.tracking.retention import RetentionSweep
from lockin.tracking.streak import StreakTracker
from lockin.tracking.tracker import AttentionTracker

logger = logging.getLogger(__name__)

MAX_STATS_DAYS = 366


@dataclass
class Outcome:
    """Result of one handled command. Faults are reported, never raised."""

    command: str
    ok: bool
    result: Any = None
    error: str | None = None

    def to_dict(self) -> dict:
        out = {"command": self.command, "ok": self.ok}
        if self.ok:
            out["result"] = self.result
        else:
            out["error"] = self.error
        return out


class BackgroundAgent:
    """Owns every component and all in-memory state.

    Handlers run to completion one at a time; callers must not invoke
    ``handle`` concurrently (AgentRunner serializes through its inbox).
    """

    def __init__(
        self,
        store: BaseStore,
        engine: BaseRedirectEngine,
        notifier: BaseNotifier,
        settings: Settings | None = None,
        scheduler: BaseScheduler | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or Settings()
        self.store = store
        self.engine = engine
        self.clock = clock
        self.scheduler = scheduler or StoreScheduler(store)
        self.notifications = Notifications(store, notifier)

        self.denylist = Denylist(store)
        self.tracker = AttentionTracker(
            store,
            clock=clock,
            max_interval_seconds=self.settings.max_interval_seconds,
            cadence_seconds=self.settings.tick_seconds,
        )
        self.sweep = RetentionSweep(store, clock=clock, retention_days=self.settings.retention_days)
        self.streak = StreakTracker(store)
        self.synchronizer = RuleSynchronizer(store, engine, self.settings.blocked_page, clock=clock)
        self.brain_break = BrainBreakOverride(
            store, self.scheduler, engine, self.synchronizer, self.notifications, clock=clock
        )
        self.timer = TimerStateMachine(store, self.scheduler, self.notifications, clock=clock)

    @classmethod
    def from_settings(cls, settings: Settings) -> BackgroundAgent:
        store = SQLiteStore(settings.db_path)
        if settings.engine_url:
            engine: BaseRedirectEngine = HttpRedirectEngine(settings.engine_url)
        else:
            engine = MemoryRedirectEngine()
        notifier: BaseNotifier = OsascriptNotifier() if settings.notifier == "osascript" else LogNotifier()
        return cls(store, engine, notifier, settings=settings)

    def _today(self):
        return datetime.fromtimestamp(self.clock()).date()

    def _guard(self, label: str, fn: Callable[[], Any]) -> Outcome:
        try:
            return Outcome(command=label, ok=True, result=fn())
        except LockInError as e:
            logger.warning("%s failed: %s", label, e)
            return Outcome(command=label, ok=False, error=str(e))

    def startup(self) -> list[Outcome]:
        """Process start: reconcile persisted state, then catch up on missed alarms."""
        steps = [
            ("brain_break.reconcile", self.brain_break.reconcile),
            ("synchronize", self.synchronizer.synchronize),
            ("timer.reconcile", lambda: self.timer.reconcile().to_dict()),
            ("daily_alarm", self._ensure_daily_alarm),
            ("streak", lambda: self.streak.touch(self._today())),
            ("alarms", self._fire_due_alarms),
        ]
        outcomes = [self._guard(label, fn) for label, fn in steps]
        logger.info("Agent started")
        return outcomes

    def _ensure_daily_alarm(self) -> None:
        if self.scheduler.get(names.DAILY_RESET) is None:
            self.scheduler.schedule(
                names.DAILY_RESET,
                self.clock() + names.DAILY_PERIOD_MINUTES * 60,
                period_minutes=names.DAILY_PERIOD_MINUTES,
            )

    def _fire_due_alarms(self) -> list[str]:
        fired = self.scheduler.pop_due(self.clock())
        for name in fired:
            self.handle(cmd.AlarmFired(name))
        return fired

    def handle(self, command: cmd.Command) -> Outcome:
        """Run one command to completion. Only programming errors escape."""
        return self._guard(type(command).__name__, lambda: self._dispatch(command))

    def _dispatch(self, command: cmd.Command) -> Any:
        if isinstance(command, cmd.FocusChanged):
            return self.tracker.on_focus_change(command.url)
        if isinstance(command, cmd.FocusLost):
            self.tracker.on_focus_lost()
            return None
        if isinstance(command, cmd.Tick):
            return self._tick()
        if isinstance(command, cmd.AlarmFired):
            return self._on_alarm(command.name)
        if isinstance(command, cmd.AddBlockedSite):
            host, added = self.denylist.add(command.site)
            if added:
                self.synchronizer.synchronize()
            return {"site": host, "added": added}
        if isinstance(command, cmd.RemoveBlockedSite):
            host, removed = self.denylist.remove(command.site)
            if removed:
                self.synchronizer.synchronize()
            return {"site": host, "removed": removed}
        if isinstance(command, cmd.SetTimerMode):
            return self.timer.set_mode(command.mode, command.duration_seconds).to_dict()
        if isinstance(command, cmd.StartTimer):
            return self.timer.start().to_dict()
        if isinstance(command, cmd.PauseTimer):
            remaining = command.remaining_seconds
            if remaining is None:
                remaining = self.timer.display_remaining()
            return self.timer.pause(remaining).to_dict()
        if isinstance(command, cmd.ResetTimer):
            return self.timer.reset().to_dict()
        if isinstance(command, cmd.StartBrainBreak):
            return self.brain_break.start(command.minutes).to_dict()
        if isinstance(command, cmd.EndBrainBreak):
            return {"ended": self.brain_break.end()}
        if isinstance(command, cmd.SetNotifications):
            self.notifications.set_enabled(command.enabled)
            return {"enabled": self.notifications.enabled()}
        if isinstance(command, cmd.GetStats):
            return self._stats(command.days, command.limit)
        if isinstance(command, cmd.ExportData):
            return export_data(self.store, self.clock())
        if isinstance(command, cmd.ImportData):
            return self._import(command.payload)
        if isinstance(command, cmd.ClearData):
            return self._clear()
        if isinstance(command, cmd.GetStatus):
            return self.status()
        raise TypeError(f"Unhandled command type: {type(command).__name__}")

    def _tick(self) -> dict:
        flushed = self.tracker.on_tick()
        completed = self.timer.check_completion()
        fired = self._fire_due_alarms()
        return {"flushed": flushed, "completed": completed, "alarms": fired}

    def _on_alarm(self, name: str) -> Any:
        if name == names.DAILY_RESET:
            removed = self.sweep.run()
            self.streak.touch(self._today())
            return {"removedDays": removed}
        if name == names.TIMER_COMPLETE:
            return {"completed": self.timer.complete()}
        if name == names.BRAIN_BREAK_END:
            return {"ended": self.brain_break.end()}
        logger.warning("Ignoring unknown alarm %r", name)
        return None

    def _stats(self, days: int, limit: int) -> dict:
        if not 1 <= days <= MAX_STATS_DAYS:
            raise InvalidInputError(f"Stats window must be 1..{MAX_STATS_DAYS} days, got {days}")
        if limit < 1:
            raise InvalidInputError(f"Stats limit must be positive, got {limit}")
        today = self._today()
        return {
            "today": stats.daily_usage(self.store, today.isoformat()),
            "topSites": stats.top_sites(self.store, today, days=days, limit=limit),
            "week": stats.weekly_totals(self.store, today),
        }

    def _import(self, payload: dict) -> dict:
        written = import_data(self.store, payload)
        self.brain_break.reconcile()
        self.synchronizer.synchronize()
        self.timer.reconcile()
        return {"imported": written}

    def _clear(self) -> dict:
        self.tracker.cursor.close()
        self.scheduler.cancel(names.TIMER_COMPLETE)
        self.scheduler.cancel(names.BRAIN_BREAK_END)
        self.store.clear()
        self.engine.clear()
        self._ensure_daily_alarm()
        logger.info("All data cleared")
        return {"cleared": True}

    def status(self) -> dict:
        timer = self.timer.record()
        return {
            "timer": {**timer.to_dict(), "displayRemaining": self.timer.display_remaining()},
            "brainBreak": self.brain_break.state().to_dict(),
            "blockedSites": self.denylist.sites(),
            "tracking": self.tracker.cursor.hostname,
            "todaySeconds": sum(
                seconds for _, seconds in stats.daily_usage(self.store, day_key(self.clock()))
            ),
            "streak": self.streak.current(),
            "notificationsEnabled": self.notifications.enabled(),
            "ruleWarning": self.store.get(keys.RULE_WARNING),
        }
