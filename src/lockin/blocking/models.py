"""Data models for blocking: redirect rules and brain-break state."""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RedirectRule:
    """A declarative match -> redirect rule in the engine's wire format."""

    id: int
    url_filter: str
    redirect_url: str
    priority: int = 1

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "priority": self.priority,
            "urlFilter": self.url_filter,
            "redirectUrl": self.redirect_url,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> RedirectRule:
        return cls(
            id=int(raw["id"]),
            url_filter=str(raw.get("urlFilter", "")),
            redirect_url=str(raw.get("redirectUrl", "")),
            priority=int(raw.get("priority", 1)),
        )


@dataclass
class BrainBreakState:
    """While ``active`` the engine must hold no rules."""

    active: bool = False
    end_time: float | None = None

    def to_dict(self) -> dict:
        return {"active": self.active, "endTime": self.end_time}

    @classmethod
    def from_dict(cls, raw: dict | None) -> BrainBreakState:
        if not isinstance(raw, dict) or not raw.get("active"):
            return cls()
        end_time = raw.get("endTime")
        if end_time is None:
            return cls(active=True)
        try:
            return cls(active=True, end_time=float(end_time))
        except (TypeError, ValueError):
            # Without a usable end time the break counts as already expired.
            logger.warning("Malformed brain break end time: %r", end_time)
            return cls(active=True)
