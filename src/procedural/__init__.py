"""
Procedural - A Production-Rule Engine for Simulations and Generative Text.

Rules pair a condition with an effect. Each pass the engine matches rules
against a caller-owned context, picks a subset with a selection policy,
runs their effects (possibly chaining into other rules by name) and
returns an Output accumulating the pass result.

Usage:
    from procedural import Procedural, Rule

    context = {"rose": True, "gardener": False}
    engine = Procedural(context, [
        Rule(
            name="enter",
            test=lambda ctx, _: not ctx["gardener"],
            action=lambda ctx, out, _: (ctx.update(gardener=True),
                                        out.append("Gardener enters the garden.")),
        ),
    ])
    print(engine.run().get())

Package structure:
    procedural/
    ├── core/         # Settings and logging
    ├── models.py     # Rule, effects, candidates, policies
    ├── matcher.py    # Candidate discovery
    ├── selector.py   # Selection policies
    ├── activator.py  # Effect execution and named chains
    ├── output.py     # Pass result accumulator
    ├── config.py     # Engine configuration
    └── engine.py     # Orchestrator
"""

__version__ = "1.0.0"

from .config import EngineConfig
from .engine import Procedural
from .errors import (
    ChainTooDeepError,
    ConfigurationError,
    ProceduralError,
    RuleNotFoundError,
    UnsupportedAppendError,
)
from .models import Candidate, Chain, Direct, ErrorMode, Rule, SelectionPolicy
from .output import ContentType, Output

__all__ = [
    "__version__",
    # Engine
    "Procedural",
    "EngineConfig",
    # Models
    "Candidate",
    "Chain",
    "ContentType",
    "Direct",
    "ErrorMode",
    "Output",
    "Rule",
    "SelectionPolicy",
    # Errors
    "ChainTooDeepError",
    "ConfigurationError",
    "ProceduralError",
    "RuleNotFoundError",
    "UnsupportedAppendError",
]
