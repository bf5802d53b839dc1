"""The user's ordered, de-duplicated set of blocked hostnames."""

from __future__ import annotations

import logging

from lockin.blocking.hostnames import normalize_hostname
from lockin.store import keys
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)


class Denylist:
    def __init__(self, store: BaseStore):
        self.store = store

    def sites(self) -> list[str]:
        raw = self.store.get(keys.BLOCKED_SITES)
        if not isinstance(raw, list):
            return []
        return [str(s) for s in raw]

    def add(self, site: str) -> tuple[str, bool]:
        """Normalize and append ``site``. Returns (hostname, added)."""
        host = normalize_hostname(site)
        sites = self.sites()
        if host in sites:
            return host, False
        sites.append(host)
        self.store.set(keys.BLOCKED_SITES, sites)
        logger.info("Blocked %s", host)
        return host, True

    def remove(self, site: str) -> tuple[str, bool]:
        """Returns (hostname, removed)."""
        host = normalize_hostname(site)
        sites = self.sites()
        if host not in sites:
            return host, False
        sites.remove(host)
        self.store.set(keys.BLOCKED_SITES, sites)
        logger.info("Unblocked %s", host)
        return host, True
