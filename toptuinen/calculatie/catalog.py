"""
Reference catalogs: unit rates (normuren) and correction factors.

The shipped defaults live in ``calculatie/data/*.yaml``. Per-tenant factor
overrides are merged over the system defaults with
``merge_correctiefactoren``.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import yaml

from toptuinen.calculatie.models import CorrectionFactor, UnitRate
from toptuinen.core.logging import get_logger

logger = get_logger("toptuinen.calculatie.catalog")

PathLike = Union[str, Path]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_normuren(path: Optional[PathLike] = None) -> List[UnitRate]:
    """
    Load a unit-rate catalog.

    The file maps scope -> list of {activiteit, activiteit_key, normuur_per_eenheid, eenheid}.

    Args:
        path: YAML file; defaults to the configured catalogus.normuren

    Returns:
        Flat list of UnitRate in file order
    """
    if path is None:
        from toptuinen.core.config import CATALOG_PATHS

        path = CATALOG_PATHS.normuren

    raw = _read_yaml(Path(path))
    rates = []
    for scope, entries in (raw.get("normuren") or {}).items():
        for entry in entries or []:
            rates.append(UnitRate.from_dict(dict(entry, scope=scope)))

    logger.debug("Loaded %d normuren from %s", len(rates), path)
    return rates


def load_correctiefactoren(path: Optional[PathLike] = None) -> List[CorrectionFactor]:
    """Load system correction factors. The file maps type -> {waarde: factor}."""
    if path is None:
        from toptuinen.core.config import CATALOG_PATHS

        path = CATALOG_PATHS.correctiefactoren

    raw = _read_yaml(Path(path))
    factors = []
    for type_, waarden in (raw.get("correctiefactoren") or {}).items():
        for waarde, factor in (waarden or {}).items():
            factors.append(
                CorrectionFactor.from_dict({"type": type_, "waarde": waarde, "factor": factor})
            )

    logger.debug("Loaded %d correctiefactoren from %s", len(factors), path)
    return factors


# ---------------------------------------------------------------------------
# Correction factors
# ---------------------------------------------------------------------------

def merge_correctiefactoren(
    system: Iterable[CorrectionFactor],
    overrides: Iterable[CorrectionFactor],
) -> List[CorrectionFactor]:
    """
    Merge user overrides over system defaults.

    An override replaces the system factor with the same (type, waarde) in
    place; overrides with no system counterpart are appended in their own
    order.
    """
    by_key: Dict[Tuple[str, str], CorrectionFactor] = {}
    for f in overrides:
        by_key.setdefault((f.type, f.waarde), f)

    merged = []
    used = set()
    for f in system:
        key = (f.type, f.waarde)
        if key in by_key:
            merged.append(by_key[key])
            used.add(key)
        else:
            merged.append(f)

    for key, f in by_key.items():
        if key not in used:
            merged.append(f)

    return merged


class FactorCatalog:
    """
    Lookup table of correction factors keyed by (type, waarde).

    Unknown keys resolve to 1.0. When the same key appears more than once,
    the first entry wins.
    """

    def __init__(self, factors: Iterable[CorrectionFactor] = ()):
        self._factors: List[CorrectionFactor] = list(factors)
        self._index: Dict[Tuple[str, str], float] = {}
        for f in self._factors:
            self._index.setdefault((f.type, f.waarde), f.factor)

    def get(self, type_: str, waarde: Optional[str], default: float = 1.0) -> float:
        if waarde is None:
            return default
        return self._index.get((type_.lower(), str(waarde).lower()), default)

    def types(self) -> List[str]:
        seen = []
        for f in self._factors:
            if f.type not in seen:
                seen.append(f.type)
        return seen

    def __iter__(self) -> Iterator[CorrectionFactor]:
        return iter(self._factors)

    def __len__(self) -> int:
        return len(self._factors)

    @classmethod
    def coerce(cls, factors: Union["FactorCatalog", Iterable[CorrectionFactor], None]) -> "FactorCatalog":
        if isinstance(factors, FactorCatalog):
            return factors
        return cls(factors or ())


# ---------------------------------------------------------------------------
# Unit rates
# ---------------------------------------------------------------------------

def rates_for_scope(rates: Iterable[UnitRate], scope: str) -> List[UnitRate]:
    return [r for r in rates if r.scope == scope]


def find_rate(
    rates: Sequence[UnitRate],
    keys: Sequence[str] = (),
    terms: Sequence[Sequence[str]] = (),
) -> Optional[UnitRate]:
    """
    Select a unit rate for an activity.

    Explicit ``activiteit_key`` matches are tried first, in key order. When
    none matches, the legacy lookup runs: each entry of ``terms`` is a group
    of words that must all occur (case-insensitive) in the activity name,
    tried group by group. The first rate in catalog order wins at each step.
    """
    for key in keys:
        if not key:
            continue
        key = key.lower()
        for rate in rates:
            if rate.activiteit_key == key:
                return rate

    for group in terms:
        words = [w.lower() for w in group if w]
        if not words:
            continue
        for rate in rates:
            name = rate.activiteit.lower()
            if all(w in name for w in words):
                return rate

    return None


def rate_value(rate: Optional[UnitRate], fallback: float) -> float:
    """Hours per unit of a matched rate; fallback when unmatched or zero."""
    if rate is None or rate.normuur_per_eenheid <= 0:
        logger.debug("Using fallback normuur %s", fallback)
        return fallback
    return rate.normuur_per_eenheid
