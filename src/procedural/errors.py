"""
Procedural Engine Errors.

Failures the engine itself can raise during a pass or while being configured.
Exceptions raised by rule conditions, effects or resolvers are never wrapped.
"""

from __future__ import annotations


class ProceduralError(Exception):
    """Base exception for engine operations."""

    pass


class RuleNotFoundError(ProceduralError):
    """Raised when a chained or removed rule name is not in the rule list."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No rule named '{name}'")


class ChainTooDeepError(ProceduralError):
    """Raised when named-chain recursion reaches the configured depth limit."""

    def __init__(self, depth: int, max_depth: int, rule_name: str | None = None):
        self.depth = depth
        self.max_depth = max_depth
        self.rule_name = rule_name
        msg = f"Max chain depth reached ({depth} >= {max_depth})"
        if rule_name:
            msg += f" while activating '{rule_name}'"
        super().__init__(msg)


class UnsupportedAppendError(ProceduralError):
    """Raised when output content cannot accept an append or blend."""

    def __init__(self, content_type: str, reason: str | None = None):
        self.content_type = content_type
        self.reason = reason
        msg = f"Cannot append to {content_type} content"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class ConfigurationError(ProceduralError, ValueError):
    """Raised when engine configuration values are invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))
