"""
Tests for the Rule Selector policies.
"""

from __future__ import annotations

import logging
import random

import pytest

from procedural.models import Candidate, Rule, SelectionPolicy
from procedural.selector import RuleSelector


def _candidate(name, priority=0, rate=1):
    return Candidate(Rule(name=name, priority=priority, rate=rate), None)


class TestEmptyAndBasicPolicies:
    """Tests for empty input, all and first."""

    @pytest.mark.parametrize("policy", list(SelectionPolicy))
    def test_empty_candidates(self, policy):
        assert RuleSelector().choose([], policy) == []

    def test_all_keeps_order(self):
        candidates = [_candidate("a"), _candidate("b"), _candidate("c")]
        chosen = RuleSelector().choose(candidates, SelectionPolicy.ALL)

        assert chosen == candidates
        assert chosen is not candidates

    def test_first(self):
        candidates = [_candidate("a"), _candidate("b")]
        assert RuleSelector().choose(candidates, SelectionPolicy.FIRST) == [candidates[0]]

    def test_unknown_policy_raises(self):
        with pytest.raises(ValueError):
            RuleSelector().choose([_candidate("a")], "bogus")


class TestPriorityPolicy:
    """Tests for the priority policy."""

    def test_highest_priority_wins(self):
        candidates = [_candidate("low", 1), _candidate("high", 5), _candidate("mid", 3)]
        chosen = RuleSelector().choose(candidates, SelectionPolicy.PRIORITY)
        assert [c.name for c in chosen] == ["high"]

    def test_tie_goes_to_earliest(self):
        candidates = [_candidate("A", 1), _candidate("B", 1)]
        for _ in range(10):
            chosen = RuleSelector().choose(candidates, SelectionPolicy.PRIORITY)
            assert [c.name for c in chosen] == ["A"]

    def test_default_priority_is_zero(self):
        candidates = [_candidate("a"), _candidate("negative", -1)]
        chosen = RuleSelector().choose(candidates, SelectionPolicy.PRIORITY)
        assert [c.name for c in chosen] == ["a"]


class TestRandomPolicy:
    """Tests for the weighted random policy."""

    def test_returns_exactly_one(self, seeded_rng):
        candidates = [_candidate("a"), _candidate("b"), _candidate("c")]
        chosen = RuleSelector(seeded_rng).choose(candidates, SelectionPolicy.RANDOM)
        assert len(chosen) == 1
        assert chosen[0] in candidates

    def test_weighted_frequency(self, seeded_rng):
        candidates = [_candidate("light", rate=1), _candidate("heavy", rate=3)]
        selector = RuleSelector(seeded_rng)
        trials = 10_000

        heavy = sum(
            selector.choose(candidates, SelectionPolicy.RANDOM)[0].name == "heavy"
            for _ in range(trials)
        )

        assert heavy / trials == pytest.approx(0.75, abs=0.02)

    def test_same_seed_same_choices(self):
        candidates = [_candidate(str(i)) for i in range(5)]

        def draws(seed):
            selector = RuleSelector(random.Random(seed))
            return [selector.choose(candidates, SelectionPolicy.RANDOM)[0].name for _ in range(20)]

        assert draws(7) == draws(7)

    def test_zero_rate_never_chosen(self, seeded_rng):
        candidates = [_candidate("never", rate=0), _candidate("always", rate=1)]
        selector = RuleSelector(seeded_rng)
        for _ in range(100):
            assert selector.choose(candidates, SelectionPolicy.RANDOM)[0].name == "always"

    def test_all_zero_rates_fall_back_to_first(self, seeded_rng, caplog):
        candidates = [_candidate("a", rate=0), _candidate("b", rate=0)]
        with caplog.at_level(logging.WARNING, logger="procedural"):
            chosen = RuleSelector(seeded_rng).choose(candidates, SelectionPolicy.RANDOM)
        assert [c.name for c in chosen] == ["a"]
        assert "falling back" in caplog.text

    def test_draw_walks_cumulative_weights(self):
        class FixedRandom(random.Random):
            def __init__(self, value):
                super().__init__()
                self.value = value

            def random(self):
                return self.value

        candidates = [_candidate("a", rate=1), _candidate("b", rate=3)]
        # total 4: draw 0.99 -> a (cumulative 1 > 0.99), draw 1.0 -> b
        assert RuleSelector(FixedRandom(0.2475)).choose(candidates, SelectionPolicy.RANDOM)[0].name == "a"
        assert RuleSelector(FixedRandom(0.25)).choose(candidates, SelectionPolicy.RANDOM)[0].name == "b"
