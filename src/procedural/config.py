"""
Engine Configuration.

Per-engine settings: selection policy, chain depth limit, error mode and
the initial output shape. Defaults come from the process settings
(PROCEDURAL_* environment variables), so a bare ``EngineConfig()`` follows
the environment.

Configs can be built from dictionaries or YAML files:

    max_chain_depth: 8
    error_mode: lenient
    selection_policy: priority
    initial_output: []
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .core.config import get_settings
from .errors import ConfigurationError
from .models import ErrorMode, SelectionPolicy

DEFAULT_INITIAL_OUTPUT = ""


def _default_max_chain_depth() -> int:
    return get_settings().max_chain_depth


def _default_error_mode() -> ErrorMode:
    return ErrorMode(get_settings().error_mode)


def _default_selection_policy() -> SelectionPolicy:
    return SelectionPolicy(get_settings().selection_policy)


@dataclass
class EngineConfig:
    """Engine configuration."""

    max_chain_depth: int = field(default_factory=_default_max_chain_depth)
    error_mode: ErrorMode = field(default_factory=_default_error_mode)
    selection_policy: SelectionPolicy = field(default_factory=_default_selection_policy)
    initial_output: Any = DEFAULT_INITIAL_OUTPUT

    @property
    def strict(self) -> bool:
        return self.error_mode is ErrorMode.STRICT

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> EngineConfig:
        """
        Create from dictionary.

        Unknown policy or error mode strings fall back to the defaults.
        """
        if not data:
            return cls()

        config = cls()
        if "max_chain_depth" in data:
            config.max_chain_depth = data["max_chain_depth"]
        if "error_mode" in data:
            try:
                config.error_mode = ErrorMode(data["error_mode"])
            except ValueError:
                pass
        if "selection_policy" in data:
            try:
                config.selection_policy = SelectionPolicy(data["selection_policy"])
            except ValueError:
                pass
        if "initial_output" in data:
            config.initial_output = data["initial_output"]
        return config

    @classmethod
    def from_yaml(cls, path: Path | str) -> EngineConfig:
        """
        Load from a YAML file.

        Raises:
            ValueError: The document is not a mapping
            ConfigurationError: The loaded values fail validation
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Engine config must be a mapping: {path}")

        config = cls.from_dict(data)
        errors = config.validate()
        if errors:
            raise ConfigurationError(errors)
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, keeping only values that differ from the defaults."""
        defaults = EngineConfig()
        result: dict[str, Any] = {}
        if self.max_chain_depth != defaults.max_chain_depth:
            result["max_chain_depth"] = self.max_chain_depth
        if self.error_mode != defaults.error_mode:
            result["error_mode"] = self.error_mode.value
        if self.selection_policy != defaults.selection_policy:
            result["selection_policy"] = self.selection_policy.value
        if self.initial_output != DEFAULT_INITIAL_OUTPUT:
            result["initial_output"] = self.initial_output
        return result

    def validate(self) -> list[str]:
        """Validate engine configuration."""
        errors = []
        if (
            not isinstance(self.max_chain_depth, int)
            or isinstance(self.max_chain_depth, bool)
            or self.max_chain_depth < 1
        ):
            errors.append(
                f"max_chain_depth must be a positive integer, got {self.max_chain_depth!r}"
            )
        if not isinstance(self.error_mode, ErrorMode):
            errors.append(f"Invalid error mode: {self.error_mode!r}")
        if not isinstance(self.selection_policy, SelectionPolicy):
            errors.append(f"Invalid selection policy: {self.selection_policy!r}")
        return errors
