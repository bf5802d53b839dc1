"""Persistent key-value store backends."""

from lockin.store.base import BaseStore
from lockin.store.memory import MemoryStore
from lockin.store.sqlite import SQLiteStore
from lockin.store import keys

__all__ = [
    "BaseStore",
    "MemoryStore",
    "SQLiteStore",
    "keys",
]
