"""Data models for the focus/break timer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class TimerMode(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


DEFAULT_DURATIONS = {
    TimerMode.FOCUS: 1500,
    TimerMode.SHORT_BREAK: 300,
    TimerMode.LONG_BREAK: 900,
}

# Longest countdown the timer accepts.
MAX_DURATION_SECONDS = 86400


@dataclass
class TimerRecord:
    """Persisted timer state.

    ``end_time`` is authoritative while running, ``remaining_seconds`` while
    paused. ``running`` implies ``end_time`` is set; paused implies it is None.
    """

    mode: TimerMode = TimerMode.FOCUS
    remaining_seconds: int = DEFAULT_DURATIONS[TimerMode.FOCUS]
    running: bool = False
    end_time: float | None = None

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "remainingSeconds": self.remaining_seconds,
            "running": self.running,
            "endTime": self.end_time,
        }

    @classmethod
    def from_dict(cls, raw: dict | None) -> TimerRecord:
        if not isinstance(raw, dict):
            return cls()
        try:
            mode = TimerMode(raw.get("mode", TimerMode.FOCUS.value))
        except ValueError:
            mode = TimerMode.FOCUS
        remaining = raw.get("remainingSeconds")
        end_time = raw.get("endTime")
        try:
            return cls(
                mode=mode,
                remaining_seconds=(
                    min(MAX_DURATION_SECONDS, max(0, int(remaining)))
                    if remaining is not None
                    else DEFAULT_DURATIONS[mode]
                ),
                running=bool(raw.get("running", False)),
                end_time=float(end_time) if end_time is not None else None,
            )
        except (TypeError, ValueError, OverflowError):
            logger.warning("Resetting malformed timer record: %r", raw)
            return cls(mode=mode, remaining_seconds=DEFAULT_DURATIONS[mode])
