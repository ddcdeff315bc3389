"""
Procedural Centralized Configuration

Provides validated, type-safe access to environment variables using Pydantic Settings.
Values are validated on first access with helpful error messages.

Usage:
    from procedural.core.config import get_settings

    settings = get_settings()
    if settings.log_level == "DEBUG":
        ...

Environment Variables:
    PROCEDURAL_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    PROCEDURAL_LOG_JSON: Output logs as JSON
    PROCEDURAL_MAX_CHAIN_DEPTH: Default named-chain depth limit for new engines
    PROCEDURAL_ERROR_MODE: Default error mode (strict, lenient)
    PROCEDURAL_SELECTION_POLICY: Default selection policy (all, first, priority, random)
    PROCEDURAL_SEED: Seed for the engine random source when none is supplied
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_env_file() -> Path | None:
    """
    Find .env file by searching for project root markers.

    Searches upward from this file's location for pyproject.toml,
    then checks for .env in that directory.

    Returns:
        Path to .env if found, None otherwise
    """
    current = Path(__file__).resolve().parent

    for _ in range(10):  # Limit search depth
        if (current / "pyproject.toml").exists():
            env_file = current / ".env"
            if env_file.exists():
                return env_file
            return None
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


_ENV_FILE = _find_project_env_file()


class ProceduralSettings(BaseSettings):
    """
    Procedural configuration settings with validation.

    Environment variables are loaded with the PROCEDURAL_ prefix.
    Engine defaults here apply to every EngineConfig that does not
    set the value explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROCEDURAL_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for procedural components",
    )

    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format for machine parsing",
    )

    # =========================================================================
    # Engine Defaults
    # =========================================================================

    max_chain_depth: int = Field(
        default=4,
        ge=1,
        description="Maximum named-chain recursion depth",
    )

    error_mode: Literal["strict", "lenient"] = Field(
        default="strict",
        description="Whether engine failures abort the pass or degrade to no-ops",
    )

    selection_policy: Literal["all", "first", "priority", "random"] = Field(
        default="all",
        description="Which matching candidates are activated each pass",
    )

    seed: Optional[int] = Field(
        default=None,
        description="Seed for the engine random source (reproducible passes)",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("error_mode", "selection_policy", mode="before")
    @classmethod
    def lowercase_choice(cls, v: str) -> str:
        """Normalize enum-like choices to lowercase."""
        if isinstance(v, str):
            return v.lower()
        return v

    @property
    def log_level_int(self) -> int:
        """Get log level as logging constant."""
        return getattr(logging, self.log_level)


# =============================================================================
# Singleton Accessor
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> ProceduralSettings:
    """
    Get the singleton settings instance.

    Uses lru_cache to ensure settings are only loaded once.

    Returns:
        ProceduralSettings instance with validated configuration
    """
    return ProceduralSettings()


def reset_settings() -> None:
    """
    Reset the settings cache (for testing).

    After calling this, the next get_settings() call will
    reload settings from environment variables.
    """
    get_settings.cache_clear()


def is_json_logging() -> bool:
    """Check if JSON logging is enabled."""
    return get_settings().log_json
