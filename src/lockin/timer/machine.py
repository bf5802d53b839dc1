"""Focus/break countdown whose completion is driven by the wake-up scheduler."""

from __future__ import annotations

import logging
import math
import time
from typing import Callable

from lockin.alarms import names
from lockin.alarms.scheduler import BaseScheduler
from lockin.exceptions import InvalidInputError
from lockin.notify.notifier import Notifications
from lockin.store import keys
from lockin.store.base import BaseStore
from lockin.timer.models import DEFAULT_DURATIONS, MAX_DURATION_SECONDS, TimerMode, TimerRecord

logger = logging.getLogger(__name__)

_COMPLETION_MESSAGES = {
    TimerMode.FOCUS: ("Focus session complete", "Nice work. Time for a break."),
    TimerMode.SHORT_BREAK: ("Break over", "Ready to lock in again?"),
    TimerMode.LONG_BREAK: ("Long break over", "Ready to lock in again?"),
}


class TimerStateMachine:
    """Paused/Running countdown persisted as a TimerRecord.

    Two paths can observe completion: the completion alarm and the display
    side polling ``check_completion``. Whichever runs second finds the timer
    already paused and does nothing.
    """

    def __init__(
        self,
        store: BaseStore,
        scheduler: BaseScheduler,
        notifications: Notifications,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.scheduler = scheduler
        self.notifications = notifications
        self.clock = clock

    def record(self) -> TimerRecord:
        return TimerRecord.from_dict(self.store.get(keys.TIMER_STATE))

    def _save(self, record: TimerRecord) -> TimerRecord:
        self.store.set(keys.TIMER_STATE, record.to_dict())
        return record

    def display_remaining(self) -> int:
        """Seconds left as the countdown display shows them."""
        record = self.record()
        if record.running and record.end_time is not None:
            # Rounded to the millisecond before ceil.
            return max(0, math.ceil(round(record.end_time - self.clock(), 3)))
        return record.remaining_seconds

    def set_mode(self, mode: TimerMode | str, duration_seconds: int | None = None) -> TimerRecord:
        try:
            mode = TimerMode(mode)
        except ValueError:
            raise InvalidInputError(f"Unknown timer mode: {mode!r}")
        if duration_seconds is None:
            duration_seconds = DEFAULT_DURATIONS[mode]
        if not 0 < duration_seconds <= MAX_DURATION_SECONDS:
            raise InvalidInputError(
                f"Timer duration must be 1..{MAX_DURATION_SECONDS}s, got {duration_seconds}"
            )
        self.scheduler.cancel(names.TIMER_COMPLETE)
        logger.info("Timer mode %s, %ds", mode.value, duration_seconds)
        return self._save(TimerRecord(mode=mode, remaining_seconds=int(duration_seconds)))

    def start(self) -> TimerRecord:
        record = self.record()
        if record.running:
            return record
        if record.remaining_seconds <= 0:
            record.remaining_seconds = DEFAULT_DURATIONS[record.mode]
        record.end_time = self.clock() + record.remaining_seconds
        record.running = True
        self.scheduler.schedule(names.TIMER_COMPLETE, record.end_time)
        logger.info("Timer started: %s, %ds left", record.mode.value, record.remaining_seconds)
        return self._save(record)

    def pause(self, remaining_seconds: int | None = None) -> TimerRecord:
        """Stop the countdown.

        ``remaining_seconds`` comes from the display side, which derives it
        from ``end_time``; it is not recomputed here.
        """
        self.scheduler.cancel(names.TIMER_COMPLETE)
        record = self.record()
        if remaining_seconds is not None:
            record.remaining_seconds = min(MAX_DURATION_SECONDS, max(0, int(remaining_seconds)))
        record.running = False
        record.end_time = None
        return self._save(record)

    def reset(self) -> TimerRecord:
        record = self.pause()
        record.remaining_seconds = DEFAULT_DURATIONS[record.mode]
        return self._save(record)

    def complete(self) -> bool:
        """Run the completion transition. Returns False if already completed."""
        record = self.record()
        if not record.running:
            return False
        self.pause(remaining_seconds=0)
        title, body = _COMPLETION_MESSAGES[record.mode]
        self.notifications.notify(title, body)
        self.reset()
        logger.info("Timer completed: %s", record.mode.value)
        return True

    def check_completion(self) -> bool:
        """Polling-side completion check."""
        record = self.record()
        if record.running and record.end_time is not None and self.clock() >= record.end_time:
            return self.complete()
        return False

    def reconcile(self) -> TimerRecord:
        """Bring the persisted record in line with the clock and scheduler after a restart."""
        record = self.record()
        if record.running and record.end_time is None:
            logger.warning("Running timer without end time, pausing")
            return self.pause()
        if not record.running:
            if record.end_time is not None:
                record.end_time = None
                self._save(record)
            return record
        if record.end_time <= self.clock():
            self.complete()
            return self.record()
        if self.scheduler.get(names.TIMER_COMPLETE) is None:
            self.scheduler.schedule(names.TIMER_COMPLETE, record.end_time)
            logger.info("Re-armed timer completion alarm")
        return record
