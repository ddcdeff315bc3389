"""
Procedural Engine - Main Orchestrator.

The engine owns a rule list and a reference to caller-owned context, and
runs passes over them:

1. Match: find (rule, target) candidates whose condition holds
2. Select: apply the selection policy
3. Activate: run each selected candidate's effect, following named chains
4. Return the pass Output

The engine never copies the context and never schedules passes on its own;
callers decide how often to call ``run()`` (or ``Output.again()``).
Concurrent passes over the same context must be serialized by the caller.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Mapping
from dataclasses import fields, replace
from typing import Any

from .activator import RuleActivator
from .config import EngineConfig
from .core.config import get_settings
from .core.logging import get_logger
from .errors import ConfigurationError, RuleNotFoundError
from .matcher import RuleMatcher
from .models import Candidate, ErrorMode, Rule, SelectionPolicy
from .output import Output, copy_content
from .selector import RuleSelector

logger = get_logger(__name__)

_CONFIG_FIELDS = frozenset(f.name for f in fields(EngineConfig))


def _as_rule(rule: Rule | Mapping[str, Any]) -> Rule:
    if isinstance(rule, Rule):
        return rule
    if isinstance(rule, Mapping):
        return Rule.from_dict(rule)
    raise TypeError(f"Expected a Rule or mapping, got {type(rule).__name__}")


def _coerce_option(key: str, value: Any) -> Any:
    """Convert a configure() option to its EngineConfig type."""
    try:
        if key == "error_mode":
            return ErrorMode(value)
        if key == "selection_policy":
            return SelectionPolicy(value)
    except ValueError:
        raise ConfigurationError([f"Invalid {key}: {value!r}"]) from None
    return value


class Procedural:
    """
    Production-rule engine.

    Usage:
        engine = Procedural(context, [
            Rule(name="enter", test=lambda ctx, _: not ctx["gardener"],
                 action=lambda ctx, out, _: out.append("Gardener enters.")),
        ])
        text = engine.run().again("\\n").get()
    """

    def __init__(
        self,
        context: Any,
        rules: Iterable[Rule | Mapping[str, Any]] | None = None,
        config: EngineConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            context: Caller-owned state the rules operate on (not copied)
            rules: Initial rules, in evaluation order
            config: Engine configuration (defaults from PROCEDURAL_* settings)
            rng: Random source for the random policy (defaults to PROCEDURAL_SEED)

        Raises:
            ConfigurationError: config fails validation
        """
        self._context = context
        self._rules: list[Rule] = [_as_rule(r) for r in rules or ()]
        self._config = config if config is not None else EngineConfig()
        errors = self._config.validate()
        if errors:
            raise ConfigurationError(errors)

        if rng is None:
            rng = random.Random(get_settings().seed)
        self._matcher = RuleMatcher()
        self._selector = RuleSelector(rng)

    # =========================================================================
    # Context & Configuration
    # =========================================================================

    @property
    def context(self) -> Any:
        return self._context

    @context.setter
    def context(self, context: Any) -> None:
        self._context = context

    def set_context(self, context: Any) -> Procedural:
        """Replace the context reference used by later passes."""
        self._context = context
        return self

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def strict(self) -> bool:
        return self._config.strict

    @property
    def rng(self) -> random.Random:
        return self._selector.rng

    def configure(
        self,
        config: EngineConfig | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> Procedural:
        """
        Update engine configuration.

        Args:
            config: A full EngineConfig, or a mapping of options to change
            **overrides: Options to change (max_chain_depth, error_mode,
                selection_policy, initial_output)

        Raises:
            ConfigurationError: Unknown option or invalid value
        """
        if isinstance(config, EngineConfig):
            updated = replace(config)
            options: dict[str, Any] = {}
        else:
            updated = replace(self._config)
            options = dict(config or {})
        options.update(overrides)

        unknown = sorted(set(options) - _CONFIG_FIELDS)
        if unknown:
            raise ConfigurationError([f"Unknown configuration option: {k}" for k in unknown])

        for key, value in options.items():
            setattr(updated, key, _coerce_option(key, value))

        errors = updated.validate()
        if errors:
            raise ConfigurationError(errors)

        self._config = updated
        logger.debug(f"Engine configured: {updated.to_dict()}")
        return self

    def set_max_chain_depth(self, max_chain_depth: int) -> Procedural:
        return self.configure(max_chain_depth=max_chain_depth)

    def set_initial_output(self, initial_output: Any) -> Procedural:
        return self.configure(initial_output=initial_output)

    def set_selection_policy(self, policy: SelectionPolicy | str) -> Procedural:
        return self.configure(selection_policy=policy)

    def set_error_mode(self, error_mode: ErrorMode | str) -> Procedural:
        return self.configure(error_mode=error_mode)

    # =========================================================================
    # Rules
    # =========================================================================

    @property
    def rules(self) -> list[Rule]:
        """Registered rules (copy, in evaluation order)."""
        return list(self._rules)

    def add_rule(self, *rules: Rule | Mapping[str, Any]) -> Procedural:
        """Append rules to the end of the rule list."""
        self._rules.extend(_as_rule(r) for r in rules)
        return self

    def remove_rule(self, name: str) -> Procedural:
        """
        Remove the first rule with the given name.

        Raises:
            RuleNotFoundError: No rule has that name (strict mode)
        """
        for index, rule in enumerate(self._rules):
            if rule.name == name:
                del self._rules[index]
                return self

        if self.strict:
            raise RuleNotFoundError(name)
        logger.warning(f"No rule named '{name}' to remove")
        return self

    # =========================================================================
    # Passes
    # =========================================================================

    def get_matching_rules(self) -> list[Candidate]:
        """Candidates whose condition holds against the current context."""
        return self._matcher.find(self._rules, self._context)

    def select_rules(self, candidates: list[Candidate]) -> list[Candidate]:
        """Apply the configured selection policy to candidates."""
        return self._selector.choose(candidates, self._config.selection_policy)

    def run(self) -> Output:
        """
        Run one pass.

        Returns:
            Output of the pass; its ``again`` runs another pass on this engine

        Raises:
            RuleNotFoundError: A chained rule is missing (strict mode)
            ChainTooDeepError: A chain reached max_chain_depth (strict mode)
            UnsupportedAppendError: An effect appended to record/scalar output (strict mode)
        """
        config = self._config
        output = Output(
            copy_content(config.initial_output),
            again=self.run,
            strict=config.strict,
        )

        candidates = self.get_matching_rules()
        selected = self.select_rules(candidates)
        logger.debug(
            f"Pass: {len(candidates)} matched, {len(selected)} selected "
            f"({config.selection_policy.value})"
        )

        activator = RuleActivator(
            list(self._rules),
            self._context,
            max_depth=config.max_chain_depth,
            strict=config.strict,
        )
        for candidate in selected:
            activator.activate(candidate, output)

        return output
