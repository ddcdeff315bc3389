"""
Rule Selector.

Applies a selection policy to the matched candidates:
1. all - every candidate, in match order
2. first - the first candidate
3. priority - highest rule priority, earliest candidate wins ties
4. random - one candidate drawn with probability proportional to its rate
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from .core.logging import get_logger
from .models import Candidate, SelectionPolicy

logger = get_logger(__name__)


class RuleSelector:
    """Chooses which candidates a pass activates."""

    def __init__(self, rng: random.Random | None = None) -> None:
        """
        Initialize the selector.

        Args:
            rng: Random source for the random policy (seed it for reproducible passes)
        """
        self._rng = rng if rng is not None else random.Random()

    @property
    def rng(self) -> random.Random:
        return self._rng

    def choose(
        self,
        candidates: Sequence[Candidate],
        policy: SelectionPolicy,
    ) -> list[Candidate]:
        """
        Apply a selection policy.

        Args:
            candidates: Candidates in match order
            policy: Selection policy

        Returns:
            Candidates to activate (possibly empty)
        """
        if not candidates:
            return []

        if policy is SelectionPolicy.ALL:
            return list(candidates)
        if policy is SelectionPolicy.FIRST:
            return [candidates[0]]
        if policy is SelectionPolicy.PRIORITY:
            return [self._by_priority(candidates)]
        if policy is SelectionPolicy.RANDOM:
            return [self._by_rate(candidates)]

        raise ValueError(f"Unknown selection policy: {policy!r}")

    def _by_priority(self, candidates: Sequence[Candidate]) -> Candidate:
        best = candidates[0]
        for candidate in candidates[1:]:
            # Strict comparison keeps the earliest candidate on ties
            if candidate.priority > best.priority:
                best = candidate
        return best

    def _by_rate(self, candidates: Sequence[Candidate]) -> Candidate:
        total = sum(c.rate for c in candidates)
        if total <= 0:
            logger.warning("All candidate rates are zero, falling back to first candidate")
            return candidates[0]

        draw = self._rng.random() * total
        cumulative = 0.0
        for candidate in candidates:
            cumulative += candidate.rate
            if cumulative > draw:
                return candidate

        # Float rounding can leave the draw at the very top of the range
        return candidates[-1]
