"""
toptuinen core - Shared services for all modules.

Usage:
    from toptuinen.core import get_config, get_logger, CATALOG_PATHS
"""

from toptuinen.core.config import (
    CATALOG_PATHS,
    get_calculatie_settings,
    get_config,
    get_config_value,
)
from toptuinen.core.logging import get_logger, reset_log_level, set_log_level

__all__ = [
    "get_config",
    "get_config_value",
    "get_calculatie_settings",
    "CATALOG_PATHS",
    "get_logger",
    "set_log_level",
    "reset_log_level",
]
