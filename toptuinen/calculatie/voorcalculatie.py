"""
Voorcalculatie: estimated hours per scope and project duration.

Pure functions. Catalogs and quote data are passed in; nothing is read from
disk or config here.
"""

import math
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from toptuinen.calculatie.catalog import FactorCatalog, rates_for_scope
from toptuinen.calculatie.models import (
    CorrectionFactor,
    EstimationResult,
    GlobalParameters,
    LineItem,
    ProjectDuration,
    UnitRate,
    as_mapping,
    round_half_up,
)
from toptuinen.calculatie.scopes import calculate_scope_hours
from toptuinen.core.logging import get_logger

logger = get_logger("toptuinen.calculatie.voorcalculatie")

TEAM_GROOTTES = (2, 3, 4)


def _arbeid_uren(regels: Iterable[LineItem], scope: str) -> float:
    return sum(r.hoeveelheid for r in regels if r.scope == scope and r.type == "arbeid")


def estimate(
    scope_data: Mapping[str, Mapping[str, Any]],
    global_params: GlobalParameters,
    rates: Sequence[UnitRate],
    factors: Union[FactorCatalog, Iterable[CorrectionFactor]],
    regels: Sequence[LineItem] = (),
    scopes: Optional[Sequence[str]] = None,
) -> EstimationResult:
    """
    Estimate labour hours for the selected scopes of a quote.

    Args:
        scope_data: scope -> attribute bag
        global_params: site-wide bereikbaarheid / achterstalligheid
        rates: unit-rate catalog (all scopes)
        factors: correction factors, already merged with tenant overrides
        regels: the quote's line items; arbeid rows back up scopes that
                compute to zero hours
        scopes: selected scopes in order; defaults to the keys of scope_data

    Returns:
        EstimationResult with per-scope hours and total rounded to 2 decimals
    """
    factors = FactorCatalog.coerce(factors)
    scope_data = as_mapping(scope_data)
    if isinstance(scopes, (list, tuple)):
        selected = [s for s in scopes if isinstance(s, str)]
    else:
        selected = [s for s in scope_data if isinstance(s, str)]

    bereikbaarheid_factor = factors.get("bereikbaarheid", global_params.bereikbaarheid)
    achterstalligheid_factor = (
        factors.get("achterstalligheid", global_params.achterstalligheid)
        if global_params.achterstalligheid
        else 1.0
    )

    per_scope = {}
    for scope in selected:
        uren = calculate_scope_hours(
            scope, scope_data.get(scope), rates_for_scope(rates, scope), factors
        )

        if uren == 0:
            uren = _arbeid_uren(regels, scope)
            if uren:
                logger.debug("Scope %s estimated from arbeid regels: %s uur", scope, uren)

        uren *= bereikbaarheid_factor * achterstalligheid_factor
        per_scope[scope] = round_half_up(uren, 2)

    result = EstimationResult(
        norm_uren_per_scope=per_scope,
        norm_uren_totaal=round_half_up(sum(per_scope.values()), 2),
        bereikbaarheid_factor=bereikbaarheid_factor,
        achterstalligheid_factor=achterstalligheid_factor,
    )
    logger.info(
        "Voorcalculatie: %d scopes, %s normuren", len(per_scope), result.norm_uren_totaal
    )
    return result


def _ceil_days(value: float) -> int:
    # round() first so 10.000000000000002 does not become 11
    return math.ceil(round(value, 9))


def calculate_project_duration(
    norm_uren_totaal: float,
    team_grootte: int = 2,
    effectieve_uren_per_dag: float = 7,
    buffer_percentage: Optional[float] = None,
) -> ProjectDuration:
    """
    Working days needed for a team to deliver the estimated hours.

    Args:
        norm_uren_totaal: total estimated hours
        team_grootte: 2, 3 or 4 people
        effectieve_uren_per_dag: productive hours per person per day
        buffer_percentage: optional weather/unforeseen margin; when given the
                           result also carries geschatte_dagen_met_buffer

    Raises:
        ValueError: unsupported team size, non-positive hours per day or a
                    negative buffer
    """
    if team_grootte not in TEAM_GROOTTES:
        raise ValueError(
            f"Unsupported team size: {team_grootte}. "
            f"Available: {', '.join(str(t) for t in TEAM_GROOTTES)}"
        )
    if effectieve_uren_per_dag <= 0:
        raise ValueError(f"Effective hours per day must be positive, got {effectieve_uren_per_dag}")
    if buffer_percentage is not None and buffer_percentage < 0:
        raise ValueError(f"Buffer percentage cannot be negative, got {buffer_percentage}")

    norm_uren_totaal = max(0.0, norm_uren_totaal)
    capaciteit = team_grootte * effectieve_uren_per_dag
    dagen = norm_uren_totaal / capaciteit

    result = ProjectDuration(
        geschatte_dagen=_ceil_days(dagen),
        effectieve_uren_per_dag=effectieve_uren_per_dag,
        team_grootte=team_grootte,
        norm_uren_totaal=norm_uren_totaal,
        team_capaciteit_per_dag=capaciteit,
    )
    if buffer_percentage is not None:
        result.geschatte_dagen_met_buffer = _ceil_days(dagen * (1 + buffer_percentage / 100))
    return result
