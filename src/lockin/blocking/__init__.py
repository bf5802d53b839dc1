"""Denylist, redirect rules and the brain-break override."""

from lockin.blocking.models import BrainBreakState, RedirectRule
from lockin.blocking.hostnames import normalize_hostname
from lockin.blocking.denylist import Denylist
from lockin.blocking.rules import expand_rules
from lockin.blocking.engine import BaseRedirectEngine, HttpRedirectEngine, MemoryRedirectEngine
from lockin.blocking.synchronizer import RuleSynchronizer
from lockin.blocking.brain_break import BrainBreakOverride

__all__ = [
    "BrainBreakState",
    "RedirectRule",
    "normalize_hostname",
    "Denylist",
    "expand_rules",
    "BaseRedirectEngine",
    "HttpRedirectEngine",
    "MemoryRedirectEngine",
    "RuleSynchronizer",
    "BrainBreakOverride",
]
