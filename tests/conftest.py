"""
Procedural Test Suite - Shared Fixtures and Configuration
"""

from __future__ import annotations

import os
import random

import pytest

from procedural import Procedural, Rule


# =============================================================================
# Singleton Reset
# =============================================================================


@pytest.fixture(autouse=True)
def reset_all_singletons(monkeypatch):
    """
    Reset module-level singletons and PROCEDURAL_* env vars between tests.

    Settings must be reset first since logging reads its level from them.
    """
    for key in list(os.environ):
        if key.startswith("PROCEDURAL_"):
            monkeypatch.delenv(key, raising=False)

    def do_reset():
        from procedural.core.config import reset_settings
        from procedural.core.logging import reset_logging

        reset_settings()
        reset_logging()

    do_reset()
    yield
    do_reset()


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def seeded_rng() -> random.Random:
    """Seeded Random instance for reproducible random selection."""
    return random.Random(42)


# =============================================================================
# Scenario Fixtures
# =============================================================================


@pytest.fixture
def garden_context() -> dict:
    """The rose has not been picked and the gardener is away."""
    return {"rose": True, "gardener": False}


def _enter(ctx, out, _):
    ctx["gardener"] = True
    out.append("Gardener enters the garden.")


def _pick(ctx, out, _):
    ctx["rose"] = False
    out.append("The Gardener picks the rose.")


@pytest.fixture
def garden_rules() -> list[Rule]:
    """Gardener story rules."""
    return [
        Rule(name="A", test=lambda ctx, _: not ctx["gardener"], action=_enter),
        Rule(
            name="B",
            test=lambda ctx, _: ctx["gardener"] and ctx["rose"],
            action=_pick,
        ),
        Rule(
            name="C",
            test=lambda ctx, _: ctx["gardener"] and not ctx["rose"],
            action=lambda ctx, out, _: out.append("Rose already picked,", "\n"),
        ),
        Rule(
            name="D",
            test=lambda ctx, _: ctx["gardener"] and not ctx["rose"],
            action=lambda ctx, out, _: out.append(
                "so the gardener can't pick it up anymore.", " "
            ),
        ),
    ]


@pytest.fixture
def garden_engine(garden_context, garden_rules) -> Procedural:
    return Procedural(garden_context, garden_rules)
