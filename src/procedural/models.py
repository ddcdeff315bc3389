"""
Procedural Engine Data Models.

Core data structures for rules, their effects, and the per-pass candidates
produced by matching.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .output import Output

Resolver = Callable[[Any], Sequence[Any]]
Condition = Callable[[Any, Any], Any]
Action = Callable[[Any, "Output", Any], Any]


class SelectionPolicy(str, Enum):
    """Which matching candidates get activated in a pass."""

    ALL = "all"  # Every candidate, in match order
    FIRST = "first"  # First candidate only
    PRIORITY = "priority"  # Highest priority, earliest wins ties
    RANDOM = "random"  # One candidate, weighted by rate


class ErrorMode(str, Enum):
    """How engine failures are handled inside a pass."""

    STRICT = "strict"  # Raise and abort the pass
    LENIENT = "lenient"  # Degrade to a no-op and continue


# =============================================================================
# Effects
# =============================================================================


@dataclass(frozen=True)
class Direct:
    """Effect that calls a function with (target, output, context)."""

    fn: Action


@dataclass(frozen=True)
class Chain:
    """Effect that activates other rules by name, in order."""

    names: tuple[str, ...] = ()


Effect = Union[Direct, Chain]


def _normalize_effect(action: Any) -> Effect:
    """Turn a function, a rule name or a list of rule names into an Effect."""
    if isinstance(action, (Direct, Chain)):
        return action
    if action is None:
        return Chain()
    if isinstance(action, str):
        return Chain((action,))
    if callable(action):
        return Direct(action)
    if isinstance(action, Sequence):
        names = tuple(action)
        bad = [n for n in names if not isinstance(n, str)]
        if bad:
            raise TypeError(f"Chained rule names must be strings, got {bad!r}")
        return Chain(names)
    raise TypeError(f"Unsupported rule action: {action!r}")


def _normalize_selector(on: Any) -> tuple[Resolver, ...]:
    """Turn None, a resolver or a list of resolvers into a tuple of levels."""
    if on is None:
        return ()
    if callable(on):
        return (on,)
    if isinstance(on, Sequence) and not isinstance(on, str):
        levels = tuple(on)
        for level in levels:
            if not callable(level):
                raise TypeError(f"Selector levels must be callables, got {level!r}")
        return levels
    raise TypeError(f"Unsupported rule selector: {on!r}")


# =============================================================================
# Rules
# =============================================================================


@dataclass
class Rule:
    """
    A condition -> effect production rule.

    The loose authoring fields (``on``, ``action``) are normalized at
    construction into ``selector`` (a tuple of resolver levels, empty when
    the rule is unscoped) and ``effect`` (a Direct or Chain variant).

    A rule without ``test`` never matches on its own; it only runs when
    another rule chains into it by name.

    ``rate`` is the weight under the random policy. ``None`` counts as 1,
    but an explicit 0 is kept as 0, so the rule is never drawn.
    """

    name: str | None = None
    test: bool | Condition = False
    action: Any = None
    on: Any = None
    priority: float = 0
    rate: float = 1

    selector: tuple[Resolver, ...] = field(init=False, repr=False)
    effect: Effect = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.selector = _normalize_selector(self.on)
        self.effect = _normalize_effect(self.action)

    @property
    def is_scoped(self) -> bool:
        """True when the rule is evaluated against resolved sub-targets."""
        return bool(self.selector)

    def matches(self, target: Any, context: Any) -> bool:
        """
        Evaluate the rule condition.

        Args:
            target: Resolved leaf object, or the context for unscoped rules
            context: The engine context

        Returns:
            True if the rule applies to target
        """
        if isinstance(self.test, bool):
            return self.test
        if callable(self.test):
            return bool(self.test(target, context))
        return False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Rule:
        """
        Create from a mapping.

        Accepts both the long field names (selector, condition, effect,
        weight) and the short ones (on, test, action, rate).
        """
        return cls(
            name=data.get("name"),
            test=data.get("condition", data.get("test", False)),
            action=data.get("effect", data.get("action")),
            on=data.get("selector", data.get("on")),
            priority=data.get("priority", 0),
            rate=data.get("weight", data.get("rate", 1)),
        )


@dataclass
class Candidate:
    """
    A rule paired with the concrete target it matched this pass.

    The target is the same object reachable from the context, never a copy,
    so effects that mutate it mutate the context.
    """

    rule: Rule
    target: Any

    @property
    def name(self) -> str | None:
        return self.rule.name

    @property
    def priority(self) -> float:
        return self.rule.priority if self.rule.priority is not None else 0

    @property
    def rate(self) -> float:
        return self.rule.rate if self.rule.rate is not None else 1
