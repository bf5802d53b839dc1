"""Redirect engine backends: an in-process engine and an HTTP-controlled one."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from lockin.blocking.models import RedirectRule
from lockin.exceptions import RuleUpdateError

logger = logging.getLogger(__name__)


class BaseRedirectEngine(ABC):
    """Abstract interface for a declarative redirect engine.

    Rule ids are caller-managed; the caller must avoid collisions.
    """

    @abstractmethod
    def list_active_rules(self) -> list[RedirectRule]:
        """Current rules, in engine order."""
        ...

    @abstractmethod
    def replace_rules(self, remove_ids: list[int], add_rules: list[RedirectRule]) -> None:
        """Remove ``remove_ids`` then add ``add_rules`` as one update."""
        ...

    def clear(self) -> None:
        """Remove every active rule."""
        ids = [rule.id for rule in self.list_active_rules()]
        if ids:
            self.replace_rules(ids, [])


class MemoryRedirectEngine(BaseRedirectEngine):
    """Keeps rules in a dict and can answer which rule a URL would hit."""

    def __init__(self) -> None:
        self._rules: dict[int, RedirectRule] = {}

    def list_active_rules(self) -> list[RedirectRule]:
        return [self._rules[i] for i in sorted(self._rules)]

    def replace_rules(self, remove_ids: list[int], add_rules: list[RedirectRule]) -> None:
        removing = set(remove_ids)
        for rule in add_rules:
            if rule.id in self._rules and rule.id not in removing:
                raise RuleUpdateError(f"Rule id {rule.id} already in use")
        for rule_id in remove_ids:
            self._rules.pop(rule_id, None)
        for rule in add_rules:
            self._rules[rule.id] = rule

    def match(self, url: str) -> RedirectRule | None:
        """First rule (lowest id) whose filter matches ``url``."""
        for rule in self.list_active_rules():
            if _filter_matches(rule.url_filter, url):
                return rule
        return None


def _filter_matches(url_filter: str, url: str) -> bool:
    """Subset of the ``||host^`` / ``||host/*`` filter syntax used by expand_rules."""
    if not url_filter.startswith("||"):
        return url_filter in url
    rest = url.split("://", 1)[-1].lower()
    pattern = url_filter[2:].lower()
    if pattern.endswith("^"):
        host = pattern[:-1]
        return rest == host or rest.startswith((host + "/", host + ":", host + "?"))
    if pattern.endswith("/*"):
        return rest.startswith(pattern[:-1])
    return rest.startswith(pattern)


class HttpRedirectEngine(BaseRedirectEngine):
    """Redirect engine controlled over a JSON HTTP API.

    ``GET {base_url}/rules`` lists rules; ``POST {base_url}/rules/update``
    takes ``{"removeRuleIds": [...], "addRules": [...]}``.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, transport=None):
        try:
            import httpx
        except ImportError:
            raise ImportError(
                "httpx is required for HttpRedirectEngine. "
                "Install with: pip install lockin[http]"
            )
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def list_active_rules(self) -> list[RedirectRule]:
        import httpx

        try:
            response = self._client.get("/rules")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RuleUpdateError(f"Failed to list rules from {self.base_url}: {e}") from e
        if not isinstance(payload, list):
            raise RuleUpdateError(f"Unexpected rule listing from {self.base_url}: {payload!r}")
        try:
            return [RedirectRule.from_dict(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            raise RuleUpdateError(f"Malformed rule from {self.base_url}: {e}") from e

    def replace_rules(self, remove_ids: list[int], add_rules: list[RedirectRule]) -> None:
        import httpx

        body = {
            "removeRuleIds": list(remove_ids),
            "addRules": [rule.to_dict() for rule in add_rules],
        }
        try:
            response = self._client.post("/rules/update", json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RuleUpdateError(f"Rule update rejected by {self.base_url}: {e}") from e
        logger.debug(
            "Engine update: removed %d, added %d", len(remove_ids), len(add_rules)
        )
