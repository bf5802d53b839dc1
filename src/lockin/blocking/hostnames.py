"""Hostname normalization for denylist entries."""

from __future__ import annotations

import re

from lockin.exceptions import InvalidDestinationError

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_HOSTNAME_RE = re.compile(r"^[a-z0-9]([a-z0-9-]*[a-z0-9])?(\.[a-z0-9]([a-z0-9-]*[a-z0-9])?)*(:\d{1,5})?$")


def normalize_hostname(site: str) -> str:
    """``"https://www.Example.com/path"`` -> ``"example.com"``.

    Strips scheme and a leading ``www.``, truncates at the first ``/`` and
    case-folds. Raises InvalidDestinationError if nothing usable remains.
    """
    host = (site or "").strip()
    host = _SCHEME_RE.sub("", host)
    host = host.split("/", 1)[0].casefold()
    if host.startswith("www."):
        host = host[4:]
    if not host:
        raise InvalidDestinationError(f"Empty hostname from {site!r}")
    if not _HOSTNAME_RE.match(host):
        raise InvalidDestinationError(f"Not a hostname: {site!r}")
    return host
