"""
Rule Activator.

Executes a candidate's effect. Direct effects call the rule function;
chain effects look up each named rule and activate it against the same
target, one name at a time, depth-first.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .core.logging import get_logger
from .errors import ChainTooDeepError, RuleNotFoundError
from .models import Candidate, Chain, Direct, Rule
from .output import Output

logger = get_logger(__name__)


def find_rule(rules: Sequence[Rule], name: str) -> Rule | None:
    """
    Look up a rule by name.

    Names are not unique; the first rule in list order wins.
    """
    for rule in rules:
        if rule.name == name:
            return rule
    return None


class RuleActivator:
    """
    Activates candidates for a single pass.

    Holds the rule list and context as they were when the pass started,
    plus the chain depth limit and error mode.
    """

    def __init__(
        self,
        rules: Sequence[Rule],
        context: Any,
        max_depth: int,
        strict: bool = True,
    ) -> None:
        self._rules = rules
        self._context = context
        self._max_depth = max_depth
        self._strict = strict

    def activate(self, candidate: Candidate, output: Output, depth: int = 0) -> None:
        """
        Run a candidate's effect.

        Args:
            candidate: Rule and the target it applies to
            output: Accumulator for this pass
            depth: Named-chain depth of this activation

        Raises:
            ChainTooDeepError: depth reached the limit (strict mode)
            RuleNotFoundError: a chained name is missing (strict mode)
        """
        if depth >= self._max_depth:
            if self._strict:
                raise ChainTooDeepError(depth, self._max_depth, candidate.name)
            logger.warning(
                f"Chain depth limit {self._max_depth} reached at '{candidate.name}', stopping"
            )
            return

        effect = candidate.rule.effect
        if isinstance(effect, Direct):
            effect.fn(candidate.target, output, self._context)
        elif isinstance(effect, Chain):
            for name in effect.names:
                self._activate_named(name, candidate.target, output, depth)

    def _activate_named(self, name: str, target: Any, output: Output, depth: int) -> None:
        rule = find_rule(self._rules, name)
        if rule is None:
            if self._strict:
                raise RuleNotFoundError(name)
            logger.warning(f"Skipping missing chain target '{name}'")
            return

        logger.debug(f"Chaining into '{name}' at depth {depth + 1}")
        # The chained rule's own condition is not evaluated
        self.activate(Candidate(rule, target), output, depth + 1)
