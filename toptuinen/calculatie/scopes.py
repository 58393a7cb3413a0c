"""
Scope identifiers and the per-scope hour formulas.

Each formula turns one scope's attribute bag into raw hours (before the
global bereikbaarheid/achterstalligheid factors). Formulas register
themselves against a ``Scope`` member; specials and overig have no formula
and are estimated from the quote's arbeid line items instead.

Attribute names are read in snake_case first, then in the camelCase form
the quote editor stores (``type_bestrating`` / ``typeBestrating``).
"""

import math
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from toptuinen.calculatie.catalog import FactorCatalog, find_rate, rate_value
from toptuinen.calculatie.models import UnitRate, as_mapping, to_flag, to_number, to_text


class Scope(str, Enum):
    GRONDWERK = "grondwerk"
    BESTRATING = "bestrating"
    BORDERS = "borders"
    GRAS = "gras"
    HOUTWERK = "houtwerk"
    WATER_ELEKTRA = "water_elektra"
    SPECIALS = "specials"
    GRAS_ONDERHOUD = "gras_onderhoud"
    BORDERS_ONDERHOUD = "borders_onderhoud"
    HEGGEN = "heggen"
    BOMEN = "bomen"
    OVERIG = "overig"


# Scopes estimated only from arbeid line items
LINE_ITEM_SCOPES = frozenset({Scope.SPECIALS, Scope.OVERIG})

# Soil volume (m3 per m2 excavated) per depth category
AFVOER_COEFFICIENTEN = {
    "licht": 0.15,
    "standaard": 0.3,
    "zwaar": 0.5,
}

# Estimated trench length per water/electricity fixture (m)
SLEUF_METER_PER_PUNT = 3

ScopeFormula = Callable[[Mapping[str, Any], Sequence[UnitRate], FactorCatalog], float]

_FORMULAS: Dict[Scope, ScopeFormula] = {}


def scope_formula(scope: Scope) -> Callable[[ScopeFormula], ScopeFormula]:
    """Register the decorated function as the hour formula for ``scope``."""

    def decorator(func: ScopeFormula) -> ScopeFormula:
        if scope in _FORMULAS:
            raise ValueError(f"Formula already registered for scope: {scope.value}")
        _FORMULAS[scope] = func
        return func

    return decorator


def parse_scope(value: Any) -> Optional[Scope]:
    if isinstance(value, Scope):
        return value
    try:
        return Scope(str(value).strip().lower())
    except ValueError:
        return None


def get_scope_formula(scope: Any) -> Optional[ScopeFormula]:
    """Formula for a scope, or None for line-item scopes and unknown identifiers."""
    parsed = parse_scope(scope)
    if parsed is None:
        return None
    return _FORMULAS.get(parsed)


def registered_scopes() -> List[Scope]:
    return [s for s in Scope if s in _FORMULAS]


def missing_formulas() -> List[Scope]:
    """Scopes with neither a formula nor line-item estimation. Empty when complete."""
    return [s for s in Scope if s not in _FORMULAS and s not in LINE_ITEM_SCOPES]


def calculate_scope_hours(
    scope: Any,
    data: Optional[Mapping[str, Any]],
    rates: Sequence[UnitRate],
    factors: FactorCatalog,
) -> float:
    """Raw hours for one scope; 0.0 when the scope has no formula."""
    formula = get_scope_formula(scope)
    if formula is None:
        return 0.0
    return max(0.0, formula(as_mapping(data), rates, factors))


# ---------------------------------------------------------------------------
# Attribute readers
# ---------------------------------------------------------------------------

def _raw(data: Mapping[str, Any], names: Sequence[str]) -> Any:
    if not isinstance(data, Mapping):
        return None
    for name in names:
        if name in data:
            return data[name]
    return None


def _quantity(data: Mapping[str, Any], *names: str, default: float = 0.0) -> float:
    value = to_number(_raw(data, names), default)
    return value if value > 0 else default


def _choice(data: Mapping[str, Any], *names: str, default: str) -> str:
    return to_text(_raw(data, names), default)


def _flag(data: Mapping[str, Any], *names: str) -> bool:
    return to_flag(_raw(data, names))


# ---------------------------------------------------------------------------
# Aanleg (construction) scopes
# ---------------------------------------------------------------------------

@scope_formula(Scope.GRONDWERK)
def grondwerk(data, rates, factors) -> float:
    oppervlakte = _quantity(data, "oppervlakte")
    diepte = _choice(data, "diepte", default="standaard")
    afvoer_grond = _flag(data, "afvoer_grond", "afvoerGrond")

    uren = (
        oppervlakte
        * rate_value(find_rate(rates, ["ontgraven"], [["ontgraven"]]), 0.25)
        * factors.get("diepte", diepte)
    )

    if afvoer_grond:
        volume = oppervlakte * AFVOER_COEFFICIENTEN.get(diepte, AFVOER_COEFFICIENTEN["standaard"])
        uren += volume * rate_value(find_rate(rates, ["afvoer"], [["afvoer"]]), 0.1)

    return uren


@scope_formula(Scope.BESTRATING)
def bestrating(data, rates, factors) -> float:
    oppervlakte = _quantity(data, "oppervlakte")
    type_bestrating = _choice(data, "type_bestrating", "typeBestrating", default="tegel")
    snijwerk = _choice(data, "snijwerk", default="laag")

    leggen = find_rate(rates, [type_bestrating], [[type_bestrating], ["leggen"]])
    uren = oppervlakte * rate_value(leggen, 0.4) * factors.get("snijwerk", snijwerk)

    zandbed = find_rate(rates, ["zandbed"], [["zandbed"]])
    uren += oppervlakte * rate_value(zandbed, 0.1)
    return uren


@scope_formula(Scope.BORDERS)
def borders(data, rates, factors) -> float:
    oppervlakte = _quantity(data, "oppervlakte")
    intensiteit = _choice(data, "beplantingsintensiteit", default="gemiddeld")

    grond = find_rate(rates, ["grondbewerking"], [["grondbewerking"]])
    uren = oppervlakte * rate_value(grond, 0.2)

    planten = find_rate(rates, [f"planten_{intensiteit}"], [[intensiteit], ["planten"]])
    uren += oppervlakte * rate_value(planten, 0.25) * factors.get("intensiteit", intensiteit)
    return uren


@scope_formula(Scope.GRAS)
def gras(data, rates, factors) -> float:
    oppervlakte = _quantity(data, "oppervlakte")
    type_gras = _choice(data, "type", default="graszoden")

    fallback = 0.12 if type_gras == "graszoden" else 0.05
    return oppervlakte * rate_value(find_rate(rates, [type_gras], [[type_gras]]), fallback)


@scope_formula(Scope.HOUTWERK)
def houtwerk(data, rates, factors) -> float:
    afmeting = _quantity(data, "afmeting")
    type_houtwerk = _choice(data, "type_houtwerk", "typeHoutwerk", default="schutting")
    fundering = _choice(data, "fundering", default="standaard")

    uren = afmeting * rate_value(find_rate(rates, [type_houtwerk], [[type_houtwerk]]), 0.8)

    # One post every 2 m of fencing; other woodwork sits on 4 posts
    aantal_palen = math.ceil(afmeting / 2) if type_houtwerk == "schutting" else 4
    fundering_rate = find_rate(
        rates, [f"fundering_{fundering}"], [["fundering", fundering]]
    )
    uren += aantal_palen * rate_value(fundering_rate, 0.5)
    return uren


@scope_formula(Scope.WATER_ELEKTRA)
def water_elektra(data, rates, factors) -> float:
    aantal_punten = _quantity(data, "aantal_punten", "aantalPunten")
    sleuven_nodig = _flag(data, "sleuven_nodig", "sleuvenNodig")

    uren = aantal_punten * rate_value(find_rate(rates, ["armatuur"], [["armatuur"]]), 0.5)

    if sleuven_nodig:
        sleuf = find_rate(rates, ["sleuf_graven"], [["sleuf graven"]])
        uren += aantal_punten * SLEUF_METER_PER_PUNT * rate_value(sleuf, 0.3)
    return uren


# ---------------------------------------------------------------------------
# Onderhoud (maintenance) scopes
# ---------------------------------------------------------------------------

@scope_formula(Scope.GRAS_ONDERHOUD)
def gras_onderhoud(data, rates, factors) -> float:
    if not _flag(data, "maaien"):
        return 0.0
    oppervlakte = _quantity(data, "gras_oppervlakte", "grasOppervlakte")
    return oppervlakte * rate_value(find_rate(rates, ["maaien"], [["maaien"]]), 0.02)


@scope_formula(Scope.BORDERS_ONDERHOUD)
def borders_onderhoud(data, rates, factors) -> float:
    oppervlakte = _quantity(data, "border_oppervlakte", "borderOppervlakte")
    intensiteit = _choice(data, "onderhoudsintensiteit", default="gemiddeld")

    wieden = find_rate(rates, [f"wieden_{intensiteit}"], [[intensiteit], ["wieden"]])
    return oppervlakte * rate_value(wieden, 0.15)


@scope_formula(Scope.HEGGEN)
def heggen(data, rates, factors) -> float:
    volume = (
        _quantity(data, "lengte")
        * _quantity(data, "hoogte", default=1.0)
        * _quantity(data, "breedte", default=0.5)
    )
    return volume * rate_value(find_rate(rates, ["heg_snoeien"], [["heg snoeien"]]), 0.15)


@scope_formula(Scope.BOMEN)
def bomen(data, rates, factors) -> float:
    aantal_bomen = _quantity(data, "aantal_bomen", "aantalBomen")
    snoei = _choice(data, "snoei", default="licht")

    boom = find_rate(rates, [f"boom_{snoei}"], [[snoei], ["boom"]])
    return aantal_bomen * rate_value(boom, 1.5 if snoei == "zwaar" else 0.5)
