"""Tests for the timer state machine."""

from unittest.mock import MagicMock

import pytest

from lockin.alarms import names
from lockin.alarms.scheduler import StoreScheduler
from lockin.exceptions import InvalidInputError
from lockin.notify.notifier import LogNotifier, Notifications
from lockin.store import keys
from lockin.timer.machine import TimerStateMachine
from lockin.timer.models import TimerMode, TimerRecord


@pytest.fixture
def notifier():
    return LogNotifier()


@pytest.fixture
def scheduler(store):
    return StoreScheduler(store)


@pytest.fixture
def timer(store, scheduler, notifier, clock):
    return TimerStateMachine(store, scheduler, Notifications(store, notifier), clock=clock)


def test_defaults(timer):
    record = timer.record()
    assert record == TimerRecord(mode=TimerMode.FOCUS, remaining_seconds=1500, running=False, end_time=None)


def test_set_mode_pauses_and_cancels(timer, scheduler):
    timer.start()
    record = timer.set_mode("shortBreak", 120)
    assert record.mode is TimerMode.SHORT_BREAK
    assert record.remaining_seconds == 120
    assert record.running is False
    assert record.end_time is None
    assert scheduler.get(names.TIMER_COMPLETE) is None


def test_set_mode_default_duration(timer):
    assert timer.set_mode(TimerMode.LONG_BREAK).remaining_seconds == 900


@pytest.mark.parametrize("mode, duration", [("nap", 10), ("focus", 0), ("focus", -5), ("focus", 86401)])
def test_set_mode_rejects_bad_input(timer, mode, duration):
    with pytest.raises(InvalidInputError):
        timer.set_mode(mode, duration)


def test_start_schedules_alarm(timer, scheduler, clock):
    record = timer.start()
    assert record.running is True
    assert record.end_time == clock() + 1500
    assert scheduler.get(names.TIMER_COMPLETE).fire_at == record.end_time


def test_start_is_noop_when_running(timer, clock):
    first = timer.start()
    clock.advance(100)
    assert timer.start() == first


def test_pause_keeps_display_value(timer, scheduler, clock):
    timer.start()
    clock.advance(200)
    shown = timer.display_remaining()
    record = timer.pause(shown)
    assert record.remaining_seconds == 1300
    assert record.running is False and record.end_time is None
    assert scheduler.get(names.TIMER_COMPLETE) is None


def test_pause_then_start_does_not_drift(timer, clock):
    timer.start()
    clock.advance(123.4)
    shown = timer.display_remaining()
    timer.pause(shown)
    timer.start()
    assert timer.display_remaining() == shown
    assert timer.record().remaining_seconds == shown


def test_reset_restores_mode_default(timer, clock):
    timer.set_mode("shortBreak", 42)
    timer.start()
    clock.advance(10)
    record = timer.reset()
    assert record.remaining_seconds == 300
    assert record.running is False


def test_alarm_completion_then_polling_notifies_once(timer, scheduler, notifier, clock):
    timer.set_mode("focus", 1500)
    timer.start()
    clock.advance(1500)

    fired = scheduler.pop_due(clock())
    assert fired == [names.TIMER_COMPLETE]
    assert timer.complete() is True
    assert timer.check_completion() is False

    record = timer.record()
    assert record.running is False
    assert record.remaining_seconds == 1500
    assert notifier.sent == [("Focus session complete", "Nice work. Time for a break.")]


def test_polling_completion_then_alarm_notifies_once(timer, scheduler, notifier, clock):
    timer.start()
    clock.advance(1501)
    assert timer.check_completion() is True
    assert scheduler.pop_due(clock()) == []
    assert timer.complete() is False
    assert len(notifier.sent) == 1


def test_polling_before_end_does_nothing(timer, clock):
    timer.start()
    clock.advance(1499)
    assert timer.check_completion() is False
    assert timer.record().running is True


def test_reconcile_completes_overdue_timer(store, scheduler, notifier, clock):
    store.set(keys.TIMER_STATE, {"mode": "longBreak", "remainingSeconds": 900,
                                 "running": True, "endTime": clock() - 5})
    timer = TimerStateMachine(store, scheduler, Notifications(store, notifier), clock=clock)
    record = timer.reconcile()
    assert record.running is False
    assert record.remaining_seconds == 900
    assert notifier.sent == [("Long break over", "Ready to lock in again?")]


def test_reconcile_rearms_future_timer(store, scheduler, notifier, clock):
    store.set(keys.TIMER_STATE, {"mode": "focus", "remainingSeconds": 1500,
                                 "running": True, "endTime": clock() + 60})
    timer = TimerStateMachine(store, scheduler, Notifications(store, notifier), clock=clock)
    record = timer.reconcile()
    assert record.running is True
    assert scheduler.get(names.TIMER_COMPLETE).fire_at == clock() + 60
    assert notifier.sent == []


def test_reconcile_keeps_persisted_alarm(store, clock, notifier):
    scheduler = MagicMock()
    scheduler.get.return_value = object()
    store.set(keys.TIMER_STATE, {"mode": "focus", "remainingSeconds": 1500,
                                 "running": True, "endTime": clock() + 60})
    TimerStateMachine(store, scheduler, Notifications(store, notifier), clock=clock).reconcile()
    scheduler.schedule.assert_not_called()


def test_reconcile_repairs_invariant_violations(timer, store):
    store.set(keys.TIMER_STATE, {"mode": "focus", "remainingSeconds": 700, "running": True, "endTime": None})
    assert timer.reconcile().running is False
    store.set(keys.TIMER_STATE, {"mode": "focus", "remainingSeconds": 700, "running": False, "endTime": 5.0})
    record = timer.reconcile()
    assert record.end_time is None
    assert record.remaining_seconds == 700


def test_reconcile_paused_restores_remaining(timer, store):
    store.set(keys.TIMER_STATE, {"mode": "shortBreak", "remainingSeconds": 77, "running": False, "endTime": None})
    assert timer.reconcile().remaining_seconds == 77
    assert timer.display_remaining() == 77


def test_longest_duration_accepted(timer):
    assert timer.set_mode("focus", 86400).remaining_seconds == 86400


@pytest.mark.parametrize(
    "raw",
    [
        {"mode": "focus", "remainingSeconds": "lots"},
        {"mode": "focus", "remainingSeconds": 60, "running": True, "endTime": "later"},
        {"mode": "focus", "remainingSeconds": float("inf")},
    ],
)
def test_malformed_stored_record_resets(timer, store, clock, raw):
    store.set(keys.TIMER_STATE, raw)
    assert timer.record() == TimerRecord(mode=TimerMode.FOCUS, remaining_seconds=1500)
    record = timer.start()
    assert record.running is True
    assert record.end_time == clock() + 1500


def test_stored_remaining_clamped(timer, store):
    store.set(keys.TIMER_STATE, {"mode": "shortBreak", "remainingSeconds": 10**9})
    assert timer.record().remaining_seconds == 86400
