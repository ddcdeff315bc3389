"""
Shared infrastructure: process settings and logging.
"""

from .config import ProceduralSettings, get_settings, reset_settings
from .logging import get_logger, reset_logging, set_log_level

__all__ = [
    "ProceduralSettings",
    "get_logger",
    "get_settings",
    "reset_logging",
    "reset_settings",
    "set_log_level",
]
