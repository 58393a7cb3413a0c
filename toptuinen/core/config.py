"""
Configuration management for toptuinen.

Loads config.yaml and provides type-safe access to settings.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional

# Config file lives inside the toptuinen package
_PACKAGE_DIR = Path(__file__).parent.parent.resolve()
CONFIG_PATH = _PACKAGE_DIR / "config.yaml"

# Cache for loaded config
_config_cache: Optional[Dict[str, Any]] = None


def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Load configuration from config.yaml.

    Args:
        reload: Force reload even if cached

    Returns:
        Configuration dictionary
    """
    global _config_cache

    if _config_cache is not None and not reload:
        return _config_cache

    if not CONFIG_PATH.exists():
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        _config_cache = yaml.safe_load(f) or {}

    return _config_cache


def get_config_value(*keys: str, default: Any = None) -> Any:
    """
    Get a nested config value safely.

    Args:
        *keys: Path of keys to traverse (e.g., 'calculatie', 'drempels')
        default: Value to return if key not found

    Example:
        uurtarief = get_config_value('calculatie', 'factuur', 'uurtarief', default=45)
    """
    config = get_config()

    for key in keys:
        if isinstance(config, dict) and key in config:
            config = config[key]
        else:
            return default

    return config


_CALCULATIE_DEFAULTS = {
    "effectieve_uren_per_dag": 7,
    "team_grootte": 2,
    "buffer_percentage": 10,
    "uren_per_dag_weergave": 8,
    "dagen_drempel": 2,
    "drempels": {
        "good": 5,
        "warning": 15,
    },
    "factuur": {
        "correctie_drempel": 5,
        "uurtarief": 45,
    },
    "forecast": {
        "perioden": 3,
        "historie": 6,
        "voortschrijdend": 3,
    },
}


def get_calculatie_settings() -> Dict[str, Any]:
    """Return merged calculatie settings (config.yaml overrides defaults)."""
    cfg = get_config().get("calculatie", {}) or {}
    result = {}
    for key, default in _CALCULATIE_DEFAULTS.items():
        if isinstance(default, dict):
            merged = dict(default)
            merged.update(cfg.get(key, {}) or {})
            result[key] = merged
        else:
            result[key] = cfg.get(key, default)
    return result


class CatalogPaths:
    """
    Locations of the reference catalogs (unit rates, correction factors).

    Paths come from the ``catalogus`` section of config.yaml; relative paths
    resolve against the package directory.

    Usage:
        from toptuinen.core.config import CATALOG_PATHS
        path = CATALOG_PATHS.normuren
    """

    def __init__(self):
        self._config = None

    def _ensure_config(self):
        if self._config is None:
            self._config = get_config()

    def _resolve(self, raw: str) -> Path:
        """Resolve a path: if relative, resolve against _PACKAGE_DIR."""
        p = Path(raw)
        if not p.is_absolute():
            p = _PACKAGE_DIR / p
        return p

    def reset(self) -> None:
        """Forget the cached config so the next access re-reads it."""
        self._config = None

    @property
    def normuren(self) -> Path:
        self._ensure_config()
        raw = self._config.get("catalogus", {}).get(
            "normuren", "calculatie/data/normuren.yaml"
        )
        return self._resolve(raw)

    @property
    def correctiefactoren(self) -> Path:
        self._ensure_config()
        raw = self._config.get("catalogus", {}).get(
            "correctiefactoren", "calculatie/data/correctiefactoren.yaml"
        )
        return self._resolve(raw)

    @property
    def root(self) -> Path:
        return _PACKAGE_DIR


# Singleton instance
CATALOG_PATHS = CatalogPaths()
