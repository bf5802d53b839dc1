"""Attention tracking, usage ledger and retention."""

from lockin.tracking.models import TrackingCursor, day_key
from lockin.tracking.tracker import AttentionTracker, tracked_hostname
from lockin.tracking.retention import RetentionSweep
from lockin.tracking.streak import StreakTracker

__all__ = [
    "TrackingCursor",
    "day_key",
    "AttentionTracker",
    "tracked_hostname",
    "RetentionSweep",
    "StreakTracker",
]
