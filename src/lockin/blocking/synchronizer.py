"""Keep the redirect engine's rules equal to Denylist x BrainBreakState."""

from __future__ import annotations

import logging
import time
from typing import Callable

from lockin.blocking.denylist import Denylist
from lockin.blocking.engine import BaseRedirectEngine
from lockin.blocking.models import BrainBreakState, RedirectRule
from lockin.blocking.rules import expand_rules
from lockin.exceptions import RuleVerificationError
from lockin.store import keys
from lockin.store.base import BaseStore

logger = logging.getLogger(__name__)


def load_brain_break(store: BaseStore) -> BrainBreakState:
    return BrainBreakState.from_dict(store.get(keys.BRAIN_BREAK))


class RuleSynchronizer:
    """Replaces the engine's whole rule set; the engine is only a cache.

    Any rule added to the engine by another writer is removed on the next
    synchronization.
    """

    def __init__(
        self,
        store: BaseStore,
        engine: BaseRedirectEngine,
        blocked_page: str,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.engine = engine
        self.blocked_page = blocked_page
        self.clock = clock

    def synchronize(self, explicit_list: list[str] | None = None) -> list[RedirectRule] | None:
        """Clear then re-add all rules.

        Returns the rules added, or None when a brain break suppressed the sync.
        Raises RuleVerificationError if the engine ends up empty after a
        non-empty addition.
        """
        if load_brain_break(self.store).active:
            logger.debug("Brain break active, skipping rule sync")
            return None

        hostnames = explicit_list if explicit_list is not None else Denylist(self.store).sites()

        current_ids = [rule.id for rule in self.engine.list_active_rules()]
        if current_ids:
            self.engine.replace_rules(current_ids, [])

        rules = expand_rules(hostnames, self.blocked_page)
        if rules:
            self.engine.replace_rules([], rules)
        logger.info("Synchronized %d rule(s) for %d site(s)", len(rules), len(hostnames))

        if rules and not self.engine.list_active_rules():
            message = (
                f"Redirect engine reports no active rules after adding {len(rules)}; "
                "check the engine's permissions and configuration"
            )
            logger.error(message)
            self.store.set(keys.RULE_WARNING, {"message": message, "at": self.clock()})
            raise RuleVerificationError(message)

        if self.store.get(keys.RULE_WARNING) is not None:
            self.store.remove(keys.RULE_WARNING)
        return rules
