"""
Calculatie runner

Dict-in / dict-out entry points around the engines, used by the CLI and by
callers that hold plain JSON/YAML data. Missing settings come from
config.yaml via get_calculatie_settings(); the engines themselves never read
config.
"""

from typing import Any, Dict, List, Mapping

from toptuinen.calculatie.base import CalculationResult, Calculator
from toptuinen.calculatie.catalog import (
    FactorCatalog,
    load_correctiefactoren,
    load_normuren,
    merge_correctiefactoren,
)
from toptuinen.calculatie.correcties import bepaal_factuur_correcties
from toptuinen.calculatie.forecast import forecast_monthly
from toptuinen.calculatie.leerfeedback import (
    NacalculatieDataPoint,
    analyze_nacalculaties,
    get_suggestion_priority,
    validate_suggestion,
)
from toptuinen.calculatie.models import (
    CorrectionFactor,
    GlobalParameters,
    HourLogEntry,
    LineItem,
    MachineUsageEntry,
    UnitRate,
    Voorcalculatie,
    to_number,
)
from toptuinen.calculatie.nacalculatie import compare_variance
from toptuinen.calculatie.voorcalculatie import calculate_project_duration, estimate
from toptuinen.core.config import get_calculatie_settings


def _normuren(params: Dict[str, Any]) -> List[UnitRate]:
    rows = _rows(params, "normuren")
    if rows:
        return [UnitRate.from_dict(r) for r in rows]
    return load_normuren()


def _factoren(params: Dict[str, Any]) -> FactorCatalog:
    system = load_correctiefactoren()
    overrides = [CorrectionFactor.from_dict(f) for f in _rows(params, "correctiefactoren")]
    return FactorCatalog(merge_correctiefactoren(system, overrides))


def _rows(params: Dict[str, Any], key: str) -> List[Mapping[str, Any]]:
    """Mapping entries of a list parameter; anything else is skipped."""
    value = params.get(key)
    if not isinstance(value, (list, tuple)):
        return []
    return [row for row in value if isinstance(row, Mapping)]


def _setting(params: Dict[str, Any], key: str, settings: Dict[str, Any]) -> Any:
    value = params.get(key)
    return settings[key] if value is None else value


# ---------------------------------------------------------------------------
# Module-level run_*() functions (used by CLI directly)
# ---------------------------------------------------------------------------

def run_voorcalculatie(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Estimate hours and duration for a quote.

    Params:
        scopes: selected scopes (defaults to the keys of scope_data)
        scope_data: scope -> attribute bag
        algemeen: {bereikbaarheid, achterstalligheid}
        regels: offerte line items [{scope, type, hoeveelheid, totaal}]
        normuren: unit-rate catalog (defaults to the shipped catalog)
        correctiefactoren: tenant overrides [{type, waarde, factor}]
        team_grootte: 2, 3 or 4
        effectieve_uren_per_dag: productive hours per person per day
        buffer_percentage: duration margin

    Returns:
        Dict with the estimation, the project duration and the plan record
        a nacalculatie can be run against.
    """
    settings = get_calculatie_settings()

    estimation = estimate(
        scope_data=params.get("scope_data") or {},
        global_params=GlobalParameters.from_dict(params.get("algemeen")),
        rates=_normuren(params),
        factors=_factoren(params),
        regels=[LineItem.from_dict(r) for r in _rows(params, "regels")],
        scopes=params.get("scopes"),
    )
    duration = calculate_project_duration(
        estimation.norm_uren_totaal,
        team_grootte=int(to_number(_setting(params, "team_grootte", settings))),
        effectieve_uren_per_dag=to_number(_setting(params, "effectieve_uren_per_dag", settings)),
        buffer_percentage=to_number(_setting(params, "buffer_percentage", settings)),
    )

    result = estimation.to_dict()
    result["projectduur"] = duration.to_dict()
    result["voorcalculatie"] = Voorcalculatie.from_estimation(estimation, duration).to_dict()
    return result


def run_projectduur(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Project duration for a given number of hours.

    Params:
        norm_uren_totaal: estimated hours
        team_grootte: 2, 3 or 4
        effectieve_uren_per_dag: productive hours per person per day
        buffer_percentage: duration margin
    """
    settings = get_calculatie_settings()
    duration = calculate_project_duration(
        to_number(params.get("norm_uren_totaal")),
        team_grootte=int(to_number(_setting(params, "team_grootte", settings))),
        effectieve_uren_per_dag=to_number(_setting(params, "effectieve_uren_per_dag", settings)),
        buffer_percentage=to_number(_setting(params, "buffer_percentage", settings)),
    )
    return duration.to_dict()


def run_nacalculatie(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Compare a plan against logged hours.

    Params:
        voorcalculatie: {norm_uren_totaal, geschatte_dagen, norm_uren_per_scope, ...}
        uren_registraties: [{datum, medewerker, uren, scope, notities}]
        machine_gebruik: [{datum, uren, kosten}]
        offerte_regels: [{scope, type, totaal}] for planned machine costs
        uurtarief / correctie_drempel: invoice correction settings

    Raises:
        ValueError: when no voorcalculatie is given
    """
    settings = get_calculatie_settings()
    plan = params.get("voorcalculatie")

    variance = compare_variance(
        Voorcalculatie.from_dict(plan) if isinstance(plan, Mapping) and plan else None,
        logs=[HourLogEntry.from_dict(r) for r in _rows(params, "uren_registraties")],
        machine_usage=[MachineUsageEntry.from_dict(m) for m in _rows(params, "machine_gebruik")],
        quote_line_items=[LineItem.from_dict(r) for r in _rows(params, "offerte_regels")],
        thresholds=settings["drempels"],
        dagen_drempel=settings["dagen_drempel"],
    )

    factuur = settings["factuur"]
    correcties = bepaal_factuur_correcties(
        variance,
        uurtarief=to_number(params.get("uurtarief"), factuur["uurtarief"]),
        drempel=to_number(params.get("correctie_drempel"), factuur["correctie_drempel"]),
    )

    result = variance.to_dict()
    result["factuur_correcties"] = [c.to_dict() for c in correcties]
    return result


def run_forecast(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Forecast monthly totals.

    Params:
        trend: [{maand: 'YYYY-MM', totaal, omzet}] oldest first
        perioden / historie / voortschrijdend: forecast settings
    """
    settings = get_calculatie_settings()["forecast"]
    return forecast_monthly(
        _rows(params, "trend"),
        perioden=int(to_number(_setting(params, "perioden", settings))),
        historie=int(to_number(_setting(params, "historie", settings))),
        voortschrijdend=int(to_number(_setting(params, "voortschrijdend", settings))),
    )


def run_leerfeedback(params: Dict[str, Any]) -> Dict[str, Any]:
    """
    Suggest normuur adjustments from past nacalculaties.

    Params:
        nacalculaties: [{project_id, project_naam, afwijkingen_per_scope, geplande_uren_per_scope}]
        normuren: unit-rate catalog (defaults to the shipped catalog)
    """
    analyse = analyze_nacalculaties(
        [NacalculatieDataPoint.from_dict(d) for d in _rows(params, "nacalculaties")],
        _normuren(params),
    )

    result = analyse.to_dict()
    for suggestie, data in zip(analyse.suggesties, result["suggesties"]):
        _, warnings = validate_suggestion(suggestie)
        data["prioriteit"] = get_suggestion_priority(suggestie)
        data["waarschuwingen"] = warnings
    return result


# ---------------------------------------------------------------------------
# Calculator implementation
# ---------------------------------------------------------------------------

_CALC_DISPATCH = {
    "voorcalculatie": run_voorcalculatie,
    "projectduur": run_projectduur,
    "nacalculatie": run_nacalculatie,
    "forecast": run_forecast,
    "leerfeedback": run_leerfeedback,
}


class CalculatieCalculator(Calculator):
    """Calculator implementing the Calculator ABC for all calculatie runs."""

    @property
    def name(self) -> str:
        return "calculatie"

    def available_calculations(self) -> List[str]:
        return list(_CALC_DISPATCH.keys())

    def run_calculation(
        self, calculation_type: str, params: Dict[str, Any]
    ) -> CalculationResult:
        """
        Dispatch to the appropriate run_*() function.

        Raises:
            ValueError: If calculation_type is unknown.
        """
        func = _CALC_DISPATCH.get(calculation_type)
        if func is None:
            raise ValueError(
                f"Unknown calculation type: {calculation_type}. "
                f"Available: {', '.join(self.available_calculations())}"
            )

        return CalculationResult(
            calculation_type=calculation_type,
            data=func(params),
        )
