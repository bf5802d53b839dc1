"""Alarm names; at most one pending alarm exists per name."""

DAILY_RESET = "dailyReset"
TIMER_COMPLETE = "timerComplete"
BRAIN_BREAK_END = "brainBreakEnd"

DAILY_PERIOD_MINUTES = 1440
