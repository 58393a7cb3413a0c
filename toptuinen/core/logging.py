"""
Logging configuration for toptuinen.

One stderr handler per named logger (stdout stays clean for --format json),
same format everywhere. The default level comes from the ``logging.level``
key in config.yaml; the CLI can raise or lower it for every logger at once
with ``set_log_level``.
"""

import logging
import sys
from typing import Dict, Optional, Union

_loggers: Dict[str, logging.Logger] = {}

# Level forced by set_log_level(); applies to loggers created later too
_level_override: Optional[int] = None

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configured_level() -> int:
    from toptuinen.core.config import get_config_value

    try:
        raw = get_config_value("logging", "level", default="INFO")
    except FileNotFoundError:
        return logging.INFO
    return _parse_level(raw)


def _parse_level(level: Union[int, str, None]) -> int:
    if isinstance(level, int):
        return level
    if not level:
        return logging.INFO
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def _apply(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Get a configured logger for a module.

    Args:
        name: Logger name (e.g., 'toptuinen.calculatie.nacalculatie')
        level: Logging level; defaults to the CLI override, then config.yaml

    Returns:
        Configured logger (cached per name)
    """
    if name in _loggers:
        return _loggers[name]

    if level is not None:
        resolved = _parse_level(level)
    elif _level_override is not None:
        resolved = _level_override
    else:
        resolved = _configured_level()

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    _apply(logger, resolved)
    _loggers[name] = logger
    return logger


def set_log_level(level: Union[int, str]) -> int:
    """Apply a level to every toptuinen logger, now and later. Returns the numeric level."""
    global _level_override

    _level_override = _parse_level(level)
    for logger in _loggers.values():
        _apply(logger, _level_override)
    return _level_override


def reset_log_level() -> int:
    """Drop any override and return every logger to the configured level."""
    global _level_override

    _level_override = None
    resolved = _configured_level()
    for logger in _loggers.values():
        _apply(logger, resolved)
    return resolved
