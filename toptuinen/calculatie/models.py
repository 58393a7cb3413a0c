"""
Data records for the calculatie engines.

Inputs (rates, factors, quote line items, hour logs, machine usage) and
outputs (estimation, duration, variance) are plain dataclasses. Inputs that
arrive as loosely typed dicts go through ``from_dict``, which reads every
field leniently: malformed values fall back to a default instead of
raising.
"""

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from toptuinen.calculatie.base import DeviationStatus, InsightType


# ---------------------------------------------------------------------------
# Lenient readers
# ---------------------------------------------------------------------------

def to_number(value: Any, default: float = 0.0) -> float:
    """Return value as float, or default when it is missing, boolean or not a finite number."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        try:
            value = float(value.replace(",", "."))
        except ValueError:
            return default
    if not isinstance(value, (int, float)):
        return default
    try:
        value = float(value)
    except OverflowError:
        return default
    if math.isnan(value) or math.isinf(value):
        return default
    return value


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round to ``decimals`` places with halves going up: 0.125 -> 0.13, 2.5 -> 3, -2.5 -> -2."""
    factor = 10 ** decimals
    scaled = value * factor + 0.5
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled) / factor


def as_mapping(value: Any) -> Mapping[str, Any]:
    """value when it is a mapping, else an empty dict."""
    return value if isinstance(value, Mapping) else {}


def to_scope(value: Any) -> Optional[str]:
    """A non-empty scope string, or None."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def to_text(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Return a stripped, lower-cased string, or default when empty or not a string."""
    if not isinstance(value, str):
        return default
    value = value.strip().lower()
    return value or default


def to_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "ja", "yes", "1")
    return False


def _plain(value: Any) -> Any:
    """Convert enums nested in asdict() output to their values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


class Record:
    def to_dict(self) -> Dict[str, Any]:
        return _plain(asdict(self))


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnitRate(Record):
    """A normuur: hours per unit for one activity within a scope."""

    scope: str
    activiteit: str
    normuur_per_eenheid: float
    eenheid: str = ""
    activiteit_key: Optional[str] = None
    omschrijving: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "UnitRate":
        d = as_mapping(d)
        return cls(
            scope=str(d.get("scope", "")),
            activiteit=str(d.get("activiteit", "")),
            normuur_per_eenheid=to_number(d.get("normuur_per_eenheid")),
            eenheid=str(d.get("eenheid", "") or ""),
            activiteit_key=to_text(d.get("activiteit_key")),
            omschrijving=d.get("omschrijving"),
        )

    @property
    def identifier(self) -> str:
        return self.activiteit_key or self.activiteit


@dataclass(frozen=True)
class CorrectionFactor(Record):
    type: str
    waarde: str
    factor: float

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "CorrectionFactor":
        d = as_mapping(d)
        return cls(
            type=to_text(d.get("type"), ""),
            waarde=to_text(d.get("waarde"), ""),
            factor=to_number(d.get("factor"), 1.0),
        )


# ---------------------------------------------------------------------------
# Quote (offerte) input
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GlobalParameters(Record):
    bereikbaarheid: str = "goed"
    achterstalligheid: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> "GlobalParameters":
        d = as_mapping(d)
        return cls(
            bereikbaarheid=to_text(d.get("bereikbaarheid"), "goed"),
            achterstalligheid=to_text(d.get("achterstalligheid")),
        )


@dataclass(frozen=True)
class LineItem(Record):
    """An offerte regel. ``type`` is materiaal, arbeid or machine."""

    scope: str
    type: str
    hoeveelheid: float = 0.0
    totaal: float = 0.0
    omschrijving: str = ""

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "LineItem":
        d = as_mapping(d)
        return cls(
            scope=str(d.get("scope", "") or ""),
            type=to_text(d.get("type"), ""),
            hoeveelheid=max(0.0, to_number(d.get("hoeveelheid"))),
            totaal=max(0.0, to_number(d.get("totaal"))),
            omschrijving=str(d.get("omschrijving", "") or ""),
        )


# ---------------------------------------------------------------------------
# Estimation output
# ---------------------------------------------------------------------------

@dataclass
class EstimationResult(Record):
    norm_uren_per_scope: Dict[str, float] = field(default_factory=dict)
    norm_uren_totaal: float = 0.0
    bereikbaarheid_factor: float = 1.0
    achterstalligheid_factor: float = 1.0


@dataclass
class ProjectDuration(Record):
    geschatte_dagen: int
    effectieve_uren_per_dag: float
    team_grootte: int
    norm_uren_totaal: float
    team_capaciteit_per_dag: float
    geschatte_dagen_met_buffer: Optional[int] = None


@dataclass
class Voorcalculatie(Record):
    """The plan a variance is measured against."""

    norm_uren_totaal: float
    geschatte_dagen: int
    norm_uren_per_scope: Dict[str, float] = field(default_factory=dict)
    team_grootte: int = 2
    effectieve_uren_per_dag: float = 7.0

    @classmethod
    def from_estimation(
        cls, estimation: EstimationResult, duration: ProjectDuration
    ) -> "Voorcalculatie":
        return cls(
            norm_uren_totaal=estimation.norm_uren_totaal,
            geschatte_dagen=duration.geschatte_dagen,
            norm_uren_per_scope=dict(estimation.norm_uren_per_scope),
            team_grootte=duration.team_grootte,
            effectieve_uren_per_dag=duration.effectieve_uren_per_dag,
        )

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "Voorcalculatie":
        d = as_mapping(d)
        per_scope = as_mapping(d.get("norm_uren_per_scope"))
        return cls(
            norm_uren_totaal=max(0.0, to_number(d.get("norm_uren_totaal"))),
            geschatte_dagen=int(max(0.0, to_number(d.get("geschatte_dagen")))),
            norm_uren_per_scope={
                str(k): max(0.0, to_number(v)) for k, v in per_scope.items()
            },
            team_grootte=int(to_number(d.get("team_grootte"), 2)),
            effectieve_uren_per_dag=to_number(d.get("effectieve_uren_per_dag"), 7.0),
        )


# ---------------------------------------------------------------------------
# Actuals
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HourLogEntry(Record):
    datum: str
    medewerker: str
    uren: float
    scope: Optional[str] = None
    notities: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "HourLogEntry":
        d = as_mapping(d)
        return cls(
            datum=str(d.get("datum", "")),
            medewerker=str(d.get("medewerker", "")),
            uren=max(0.0, to_number(d.get("uren"))),
            scope=to_scope(d.get("scope")),
            notities=d.get("notities"),
        )


@dataclass(frozen=True)
class MachineUsageEntry(Record):
    datum: str
    uren: float
    kosten: float
    scope: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "MachineUsageEntry":
        d = as_mapping(d)
        return cls(
            datum=str(d.get("datum", "")),
            uren=max(0.0, to_number(d.get("uren"))),
            kosten=max(0.0, to_number(d.get("kosten"))),
            scope=to_scope(d.get("scope")),
        )


# ---------------------------------------------------------------------------
# Variance output
# ---------------------------------------------------------------------------

@dataclass
class ScopeDeviation(Record):
    scope: str
    geplande_uren: float
    werkelijke_uren: float
    afwijking_uren: float
    afwijking_percentage: float
    status: DeviationStatus


@dataclass
class Insight(Record):
    type: InsightType
    title: str
    message: str
    scope: Optional[str] = None


@dataclass
class VarianceResult(Record):
    # Totals
    geplande_uren: float
    werkelijke_uren: float
    geplande_dagen: int
    werkelijke_dagen: int
    geplande_machine_kosten: float
    werkelijke_machine_kosten: float

    # Deviations
    afwijking_uren: float
    afwijking_percentage: float
    afwijking_dagen: int
    afwijking_machine_kosten: float
    afwijking_machine_kosten_percentage: float

    status: DeviationStatus
    machine_status: DeviationStatus

    afwijkingen_per_scope: List[ScopeDeviation] = field(default_factory=list)
    werkelijke_uren_per_scope: Dict[str, float] = field(default_factory=dict)
    afwijkingen_per_scope_map: Dict[str, float] = field(default_factory=dict)

    insights: List[Insight] = field(default_factory=list)

    aantal_registraties: int = 0
    aantal_medewerkers: int = 0
