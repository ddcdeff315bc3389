"""
Rule Matcher.

Resolves each rule's selector against the context and collects the
(rule, target) candidates whose condition currently holds.

Ordering is deterministic: rules are visited in list order, and within a
scoped rule targets are visited depth-first, left to right, in the order
the resolvers return them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .core.logging import get_logger
from .models import Candidate, Rule

logger = get_logger(__name__)


class RuleMatcher:
    """Finds the candidates for one pass."""

    def find(self, rules: Iterable[Rule], context: Any) -> list[Candidate]:
        """
        Collect matching candidates.

        Args:
            rules: Rules in insertion order
            context: The engine context

        Returns:
            Candidates in rule order, then selector traversal order
        """
        candidates: list[Candidate] = []

        for rule in rules:
            if not rule.is_scoped:
                if rule.matches(context, context):
                    candidates.append(Candidate(rule, context))
                continue
            self._descend(rule, context, context, 0, candidates)

        logger.debug(f"Matched {len(candidates)} candidate(s)")
        return candidates

    def _descend(
        self,
        rule: Rule,
        node: Any,
        context: Any,
        level: int,
        candidates: list[Candidate],
    ) -> None:
        """
        Apply selector level ``level`` to node and recurse to the leaves.

        A resolver must return an iterable of targets. ``None``, strings and
        mappings are not target collections and resolve to no targets; wrap a
        single object in a list to target it.
        """
        targets = rule.selector[level](node)
        if targets is None or isinstance(targets, (str, bytes, Mapping)):
            if targets is not None:
                logger.debug(
                    f"Resolver for rule '{rule.name}' returned {type(targets).__name__}, "
                    "skipping"
                )
            return

        last = level == len(rule.selector) - 1
        for target in targets:
            if not last:
                self._descend(rule, target, context, level + 1, candidates)
            elif rule.matches(target, context):
                candidates.append(Candidate(rule, target))
