"""Expand a denylist into redirect rules with position-derived ids."""

from __future__ import annotations

from urllib.parse import quote

from lockin.blocking.models import RedirectRule

RULES_PER_SITE = 4


def blocked_redirect_url(blocked_page: str, hostname: str) -> str:
    sep = "&" if "?" in blocked_page else "?"
    return f"{blocked_page}{sep}site={quote(hostname)}"


def expand_rules(hostnames: list[str], blocked_page: str) -> list[RedirectRule]:
    """Four rules per entry: www/bare host, each with and without a path.

    Entry ``i`` owns ids ``i*4+1 .. i*4+4`` so the same list always yields
    the same ids.
    """
    rules: list[RedirectRule] = []
    for index, host in enumerate(hostnames):
        target = blocked_redirect_url(blocked_page, host)
        base = index * RULES_PER_SITE
        filters = (
            f"||www.{host}^",
            f"||{host}^",
            f"||www.{host}/*",
            f"||{host}/*",
        )
        for offset, url_filter in enumerate(filters, start=1):
            rules.append(RedirectRule(id=base + offset, url_filter=url_filter, redirect_url=target))
    return rules
