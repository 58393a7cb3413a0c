"""
Leerfeedback: normuur adjustment suggestions from past nacalculaties.

Looks for scopes that are consistently under- or overestimated across
projects and proposes scaled unit rates. Suggestions are advisory only;
nothing here changes a catalog.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from toptuinen.calculatie.models import (
    Record, UnitRate, VarianceResult, as_mapping, round_half_up, to_number,
)
from toptuinen.core.logging import get_logger

logger = get_logger("toptuinen.calculatie.leerfeedback")

MIN_PROJECTS_FOR_SUGGESTION = 3
DEVIATION_THRESHOLD = 10


@dataclass
class NacalculatieDataPoint(Record):
    project_id: str
    project_naam: str
    afwijkingen_per_scope: Dict[str, float]
    geplande_uren_per_scope: Dict[str, float]
    created_at: Optional[str] = None

    @classmethod
    def from_variance(
        cls, project_id: str, project_naam: str, variance: VarianceResult
    ) -> "NacalculatieDataPoint":
        return cls(
            project_id=project_id,
            project_naam=project_naam,
            afwijkingen_per_scope=dict(variance.afwijkingen_per_scope_map),
            geplande_uren_per_scope={
                d.scope: d.geplande_uren for d in variance.afwijkingen_per_scope
            },
        )

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "NacalculatieDataPoint":
        d = as_mapping(d)
        return cls(
            project_id=str(d.get("project_id", "")),
            project_naam=str(d.get("project_naam", "")),
            afwijkingen_per_scope={
                str(k): to_number(v) for k, v in as_mapping(d.get("afwijkingen_per_scope")).items()
            },
            geplande_uren_per_scope={
                str(k): to_number(v) for k, v in as_mapping(d.get("geplande_uren_per_scope")).items()
            },
            created_at=d.get("created_at"),
        )


@dataclass
class ActiviteitSuggestie(Record):
    normuur_id: str
    activiteit: str
    huidige_waarde: float
    gesuggereerde_waarde: float
    wijziging_percentage: float
    eenheid: str


@dataclass
class ScopeSuggestie(Record):
    id: str
    scope: str
    activiteiten: List[ActiviteitSuggestie]
    gemiddelde_afwijking: float
    gemiddelde_afwijking_percentage: float
    aantal_projecten: int
    betrouwbaarheid: str
    bron_projecten: List[str]
    reden: str
    type: str


@dataclass
class LeerfeedbackAnalyse(Record):
    suggesties: List[ScopeSuggestie] = field(default_factory=list)
    totaal_analyseerde_projecten: int = 0
    scopes_met_voldoende_data: int = 0
    scopes_zonder_suggestie: List[str] = field(default_factory=list)


def get_confidence_level(sample_size: int) -> str:
    if sample_size >= 10:
        return "hoog"
    if sample_size >= 5:
        return "gemiddeld"
    return "laag"


def _suggest_rate(rate: UnitRate, adjustment: float) -> ActiviteitSuggestie:
    huidig = rate.normuur_per_eenheid
    voorstel = round_half_up(huidig * adjustment, 3)
    wijziging = round_half_up((voorstel - huidig) / huidig * 100, 1) if huidig > 0 else 0.0
    return ActiviteitSuggestie(
        normuur_id=rate.identifier,
        activiteit=rate.activiteit,
        huidige_waarde=huidig,
        gesuggereerde_waarde=voorstel,
        wijziging_percentage=wijziging,
        eenheid=rate.eenheid,
    )


def analyze_nacalculaties(
    datapoints: Sequence[NacalculatieDataPoint],
    normuren: Sequence[UnitRate],
    min_projecten: int = MIN_PROJECTS_FOR_SUGGESTION,
    drempel: float = DEVIATION_THRESHOLD,
) -> LeerfeedbackAnalyse:
    """
    Aggregate per-scope deviations over projects and suggest new unit rates.

    A scope gets a suggestion when it appears in at least ``min_projecten``
    projects, its summed deviation is at least ``drempel`` percent of its
    summed planned hours, and the catalog has rates for it. Every rate of
    that scope is scaled by (1 + pct/100).
    """
    if not datapoints:
        return LeerfeedbackAnalyse()

    # scope -> [total deviation, total planned, project ids]
    per_scope: Dict[str, list] = {}
    for point in datapoints:
        for scope, afwijking in point.afwijkingen_per_scope.items():
            entry = per_scope.setdefault(scope, [0.0, 0.0, []])
            entry[0] += afwijking
            entry[1] += point.geplande_uren_per_scope.get(scope, 0.0)
            entry[2].append(point.project_id)

    suggesties = []
    zonder = []
    met_data = 0

    for scope, (totaal_afwijking, totaal_gepland, projecten) in per_scope.items():
        count = len(projecten)
        if count < min_projecten:
            zonder.append(scope)
            continue

        met_data += 1
        pct = totaal_afwijking / totaal_gepland * 100 if totaal_gepland > 0 else 0.0
        if abs(pct) < drempel:
            zonder.append(scope)
            continue

        scope_rates = [r for r in normuren if r.scope == scope]
        if not scope_rates:
            zonder.append(scope)
            continue

        adjustment = 1 + pct / 100
        type_ = "onderschatting" if pct > 0 else "overschatting"
        suggesties.append(ScopeSuggestie(
            id=f"suggestie_{scope}",
            scope=scope,
            activiteiten=[_suggest_rate(r, adjustment) for r in scope_rates],
            gemiddelde_afwijking=round_half_up(totaal_afwijking / count, 2),
            gemiddelde_afwijking_percentage=round_half_up(pct, 1),
            aantal_projecten=count,
            betrouwbaarheid=get_confidence_level(count),
            bron_projecten=list(projecten),
            reden=f"Gemiddelde {type_} van {abs(int(round_half_up(pct)))}% over {count} projecten",
            type=type_,
        ))

    suggesties.sort(key=lambda s: abs(s.gemiddelde_afwijking_percentage), reverse=True)

    logger.info(
        "Leerfeedback: %d projects, %d suggestions", len(datapoints), len(suggesties)
    )
    return LeerfeedbackAnalyse(
        suggesties=suggesties,
        totaal_analyseerde_projecten=len(datapoints),
        scopes_met_voldoende_data=met_data,
        scopes_zonder_suggestie=zonder,
    )


def validate_suggestion(suggestie: ScopeSuggestie) -> Tuple[bool, List[str]]:
    """Sanity checks before a user applies a suggestion. Returns (valid, warnings)."""
    warnings = []

    if suggestie.betrouwbaarheid == "laag":
        warnings.append(
            f"Lage betrouwbaarheid: gebaseerd op slechts {suggestie.aantal_projecten} projecten"
        )

    pct = abs(suggestie.gemiddelde_afwijking_percentage)
    if pct > 50:
        warnings.append(f"Grote aanpassing ({pct}%): controleer of dit realistisch is")

    for activiteit in suggestie.activiteiten:
        if activiteit.gesuggereerde_waarde <= 0:
            warnings.append(
                f"Waarschuwing: {activiteit.activiteit} zou een waarde van 0 of minder krijgen"
            )
        if abs(activiteit.wijziging_percentage) > 100:
            warnings.append(
                f"Grote wijziging voor {activiteit.activiteit}: {activiteit.wijziging_percentage}%"
            )

    return len(warnings) == 0, warnings


def get_suggestion_priority(suggestie: ScopeSuggestie) -> str:
    pct = abs(suggestie.gemiddelde_afwijking_percentage)
    if suggestie.betrouwbaarheid == "hoog" and pct > 20:
        return "hoog"
    if suggestie.betrouwbaarheid != "laag" and pct > DEVIATION_THRESHOLD:
        return "gemiddeld"
    return "laag"


def calculate_suggestion_impact(
    suggestie: ScopeSuggestie,
    average_project_hours: float,
    uurtarief: Optional[float] = None,
) -> Dict[str, float]:
    """
    Hours (and optionally euros) a suggestion would shift per average project.

    Without an hourly rate the cost difference is 0.
    """
    if suggestie.aantal_projecten <= 0:
        uren = 0.0
    else:
        uren = (suggestie.gemiddelde_afwijking_percentage / 100) * (
            average_project_hours / suggestie.aantal_projecten
        )
    uren = round_half_up(uren, 1)
    kosten = round_half_up(uren * uurtarief, 2) if uurtarief else 0.0
    return {
        "estimated_hours_difference": uren,
        "estimated_cost_difference": kosten,
    }
