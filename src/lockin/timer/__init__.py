"""Focus/break timer state machine."""

from lockin.timer.models import DEFAULT_DURATIONS, TimerMode, TimerRecord
from lockin.timer.machine import TimerStateMachine

__all__ = [
    "DEFAULT_DURATIONS",
    "TimerMode",
    "TimerRecord",
    "TimerStateMachine",
]
