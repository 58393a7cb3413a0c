"""
Nacalculatie: planned vs actual hours.

Compares a Voorcalculatie against logged hours and machine usage, classifies
deviations as good / warning / critical and produces insights. Hour entries
without a scope count toward the totals but not toward any scope.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from toptuinen.calculatie.base import DeviationStatus, InsightType
from toptuinen.calculatie.formatting import format_deviation, format_number, get_scope_label
from toptuinen.calculatie.models import (
    HourLogEntry,
    Insight,
    LineItem,
    MachineUsageEntry,
    ScopeDeviation,
    VarianceResult,
    Voorcalculatie,
    round_half_up,
)
from toptuinen.core.logging import get_logger

logger = get_logger("toptuinen.calculatie.nacalculatie")

DEVIATION_THRESHOLDS = {
    "good": 5,
    "warning": 15,
}

# Percentage reported for a scope with actual hours but no planned hours
UNPLANNED_SCOPE_PERCENTAGE = 100.0

DAGEN_DREMPEL = 2


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def get_deviation_status(
    percentage: float, thresholds: Optional[Mapping[str, float]] = None
) -> DeviationStatus:
    """
    Classify a deviation percentage. Symmetric around zero.

    abs <= good -> GOOD, abs <= warning -> WARNING, otherwise CRITICAL.
    """
    t = thresholds or DEVIATION_THRESHOLDS
    abs_pct = abs(percentage)
    if abs_pct <= t["good"]:
        return DeviationStatus.GOOD
    if abs_pct <= t["warning"]:
        return DeviationStatus.WARNING
    return DeviationStatus.CRITICAL


def deviation_percentage(afwijking: float, gepland: float) -> float:
    """Deviation as a percentage of the plan, 1 decimal; 0 when nothing was planned."""
    if gepland <= 0:
        return 0.0
    return round_half_up(afwijking / gepland * 100, 1)


def _scope_percentage(afwijking: float, gepland: float, werkelijk: float) -> float:
    if gepland > 0:
        return round_half_up(afwijking / gepland * 100, 1)
    return UNPLANNED_SCOPE_PERCENTAGE if werkelijk > 0 else 0.0


# ---------------------------------------------------------------------------
# Variance
# ---------------------------------------------------------------------------

def compare_variance(
    plan: Voorcalculatie,
    logs: Sequence[HourLogEntry],
    machine_usage: Sequence[MachineUsageEntry] = (),
    quote_line_items: Optional[Sequence[LineItem]] = None,
    thresholds: Optional[Mapping[str, float]] = None,
    dagen_drempel: float = DAGEN_DREMPEL,
) -> VarianceResult:
    """
    Compare a plan against actual hours and machine costs.

    Args:
        plan: the voorcalculatie the project was planned with
        logs: logged hour entries
        machine_usage: machine usage entries with costs
        quote_line_items: the offerte regels; machine rows give the
                          planned machine costs
        thresholds: {"good": ..., "warning": ...} percentages
        dagen_drempel: extra/fewer days before a days insight fires

    Raises:
        ValueError: plan is missing
        TypeError: plan is not a Voorcalculatie
    """
    if plan is None:
        raise ValueError("A voorcalculatie is required to compute a nacalculatie")
    if not isinstance(plan, Voorcalculatie):
        raise TypeError(f"plan must be a Voorcalculatie, got {type(plan).__name__}")

    thresholds = dict(thresholds or DEVIATION_THRESHOLDS)

    werkelijke_uren = sum(entry.uren for entry in logs)
    werkelijke_dagen = len({entry.datum for entry in logs})
    aantal_medewerkers = len({entry.medewerker for entry in logs})

    # Per scope actuals, in first-appearance order
    uren_per_scope: Dict[str, float] = {}
    for entry in logs:
        if entry.scope:
            uren_per_scope[entry.scope] = uren_per_scope.get(entry.scope, 0.0) + entry.uren

    all_scopes = list(plan.norm_uren_per_scope)
    all_scopes += [s for s in uren_per_scope if s not in plan.norm_uren_per_scope]

    afwijkingen = []
    afwijkingen_map = {}
    for scope in all_scopes:
        gepland = plan.norm_uren_per_scope.get(scope, 0.0)
        werkelijk = uren_per_scope.get(scope, 0.0)
        afwijking = werkelijk - gepland
        pct = _scope_percentage(afwijking, gepland, werkelijk)

        afwijkingen.append(ScopeDeviation(
            scope=scope,
            geplande_uren=round_half_up(gepland, 2),
            werkelijke_uren=round_half_up(werkelijk, 2),
            afwijking_uren=round_half_up(afwijking, 2),
            afwijking_percentage=pct,
            status=get_deviation_status(pct, thresholds),
        ))
        afwijkingen_map[scope] = round_half_up(afwijking, 2)

    # Largest discrepancy first; sort is stable so ties keep input order
    afwijkingen.sort(key=lambda d: abs(d.afwijking_percentage), reverse=True)

    afwijking_uren = werkelijke_uren - plan.norm_uren_totaal
    afwijking_pct = deviation_percentage(afwijking_uren, plan.norm_uren_totaal)
    afwijking_dagen = werkelijke_dagen - plan.geschatte_dagen

    werkelijke_machine = sum(m.kosten for m in machine_usage)
    geplande_machine = sum(
        r.totaal for r in (quote_line_items or ()) if r.type == "machine"
    )
    afwijking_machine = werkelijke_machine - geplande_machine
    afwijking_machine_pct = deviation_percentage(afwijking_machine, geplande_machine)

    result = VarianceResult(
        geplande_uren=plan.norm_uren_totaal,
        werkelijke_uren=round_half_up(werkelijke_uren, 2),
        geplande_dagen=plan.geschatte_dagen,
        werkelijke_dagen=werkelijke_dagen,
        geplande_machine_kosten=round_half_up(geplande_machine, 2),
        werkelijke_machine_kosten=round_half_up(werkelijke_machine, 2),
        afwijking_uren=round_half_up(afwijking_uren, 2),
        afwijking_percentage=afwijking_pct,
        afwijking_dagen=afwijking_dagen,
        afwijking_machine_kosten=round_half_up(afwijking_machine, 2),
        afwijking_machine_kosten_percentage=afwijking_machine_pct,
        status=get_deviation_status(afwijking_pct, thresholds),
        machine_status=get_deviation_status(afwijking_machine_pct, thresholds),
        afwijkingen_per_scope=afwijkingen,
        werkelijke_uren_per_scope={s: round_half_up(u, 2) for s, u in uren_per_scope.items()},
        afwijkingen_per_scope_map=afwijkingen_map,
        aantal_registraties=len(logs),
        aantal_medewerkers=aantal_medewerkers,
    )
    result.insights = generate_insights(result, thresholds, dagen_drempel)

    logger.info(
        "Nacalculatie: %s of %s uur (%s), %d insights",
        result.werkelijke_uren, result.geplande_uren,
        format_deviation(afwijking_pct), len(result.insights),
    )
    return result


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def generate_insights(
    result: VarianceResult,
    thresholds: Optional[Mapping[str, float]] = None,
    dagen_drempel: float = DAGEN_DREMPEL,
) -> List[Insight]:
    """Rule-based insights; every qualifying rule contributes one entry."""
    t = thresholds or DEVIATION_THRESHOLDS
    pct = result.afwijking_percentage
    insights = []

    if result.status == DeviationStatus.GOOD:
        insights.append(Insight(
            type=InsightType.SUCCESS,
            title="Uitstekende planning",
            message=(
                f"De werkelijke uren wijken slechts {format_number(abs(pct), 1)}% "
                f"af van de planning."
            ),
        ))
    elif pct > t["warning"]:
        insights.append(Insight(
            type=InsightType.CRITICAL,
            title="Significante overschrijding",
            message=(
                f"Er is {format_number(pct, 1)}% meer tijd besteed dan gepland. "
                f"Controleer de normuren voor betrokken scopes."
            ),
        ))
    elif pct < -t["warning"]:
        insights.append(Insight(
            type=InsightType.WARNING,
            title="Onder budget",
            message=(
                f"Er is {format_number(abs(pct), 1)}% minder tijd besteed dan gepland. "
                f"Controleer of alle werk correct is geregistreerd."
            ),
        ))

    machine_pct = result.afwijking_machine_kosten_percentage
    if abs(machine_pct) > t["warning"]:
        hoger = machine_pct > 0
        insights.append(Insight(
            type=InsightType.WARNING if hoger else InsightType.SUCCESS,
            title="Hogere machinekosten" if hoger else "Lagere machinekosten",
            message=(
                f"De machinekosten wijken {format_number(abs(machine_pct), 1)}% "
                f"af van de planning."
            ),
        ))

    if result.afwijking_dagen > dagen_drempel:
        insights.append(Insight(
            type=InsightType.WARNING,
            title="Meer dagen nodig",
            message=f"Het project duurde {result.afwijking_dagen} dagen langer dan gepland.",
        ))
    elif result.afwijking_dagen < -dagen_drempel:
        insights.append(Insight(
            type=InsightType.SUCCESS,
            title="Sneller afgerond",
            message=(
                f"Het project is {abs(result.afwijking_dagen)} dagen eerder "
                f"afgerond dan gepland."
            ),
        ))

    for deviation in result.afwijkingen_per_scope:
        if deviation.status != DeviationStatus.CRITICAL:
            continue
        onderschat = deviation.afwijking_percentage > 0
        label = get_scope_label(deviation.scope)
        insights.append(Insight(
            type=InsightType.CRITICAL if onderschat else InsightType.WARNING,
            title=f"{label}: {'Onderschatting' if onderschat else 'Overschatting'}",
            message=(
                f"{format_number(deviation.werkelijke_uren)} uur nodig vs "
                f"{format_number(deviation.geplande_uren)} uur gepland "
                f"({format_deviation(deviation.afwijking_percentage)})"
            ),
            scope=deviation.scope,
        ))

    return insights
