"""Wake-up scheduler and alarm names."""

from lockin.alarms.scheduler import Alarm, BaseScheduler, StoreScheduler
from lockin.alarms import names

__all__ = [
    "Alarm",
    "BaseScheduler",
    "StoreScheduler",
    "names",
]
