"""Time-boxed suspension of all blocking."""

from __future__ import annotations

import logging
import time
from typing import Callable

from lockin.alarms import names
from lockin.alarms.scheduler import BaseScheduler
from lockin.blocking.engine import BaseRedirectEngine
from lockin.blocking.models import BrainBreakState
from lockin.blocking.synchronizer import RuleSynchronizer, load_brain_break
from lockin.exceptions import InvalidInputError
from lockin.notify.notifier import Notifications
from lockin.store import keys
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)

MAX_BREAK_MINUTES = 1440


class BrainBreakOverride:
    """Clears the engine for a fixed time, then hands control back to the synchronizer.

    The persisted BrainBreakState is what makes RuleSynchronizer.synchronize
    a no-op during the break.
    """

    def __init__(
        self,
        store: BaseStore,
        scheduler: BaseScheduler,
        engine: BaseRedirectEngine,
        synchronizer: RuleSynchronizer,
        notifications: Notifications,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.scheduler = scheduler
        self.engine = engine
        self.synchronizer = synchronizer
        self.notifications = notifications
        self.clock = clock

    def state(self) -> BrainBreakState:
        return load_brain_break(self.store)

    def start(self, duration_minutes: float) -> BrainBreakState:
        if not 0 < duration_minutes <= MAX_BREAK_MINUTES:
            raise InvalidInputError(
                f"Brain break must be over 0 and at most {MAX_BREAK_MINUTES} minutes, got {duration_minutes}"
            )
        end_time = self.clock() + duration_minutes * 60
        self.scheduler.schedule(names.BRAIN_BREAK_END, end_time)
        state = BrainBreakState(active=True, end_time=end_time)
        self.store.set(keys.BRAIN_BREAK, state.to_dict())
        self.engine.clear()
        logger.info("Brain break started for %s minute(s)", duration_minutes)
        return state

    def end(self) -> bool:
        """Returns False if no break was active."""
        self.scheduler.cancel(names.BRAIN_BREAK_END)
        if not self.state().active:
            return False
        self.store.set(keys.BRAIN_BREAK, BrainBreakState().to_dict())
        logger.info("Brain break ended")
        self.synchronizer.synchronize()
        self.notifications.notify("Brain break over", "Blocking is back on. Time to lock in.")
        return True

    def reconcile(self) -> None:
        """On startup: end an expired break; for a live one, empty the engine and re-arm its alarm."""
        state = self.state()
        if not state.active:
            return
        if state.end_time is None or state.end_time <= self.clock():
            self.end()
            return
        self.engine.clear()
        if self.scheduler.get(names.BRAIN_BREAK_END) is None:
            self.scheduler.schedule(names.BRAIN_BREAK_END, state.end_time)
            logger.info("Re-armed brain break alarm")
