"""
toptuinen calculatie - voorcalculatie / nacalculatie engines.

Usage:
    from toptuinen.calculatie import estimate, compare_variance
"""

from toptuinen.calculatie.base import CalculationResult, Calculator, DeviationStatus, InsightType
from toptuinen.calculatie.catalog import (
    FactorCatalog,
    find_rate,
    load_correctiefactoren,
    load_normuren,
    merge_correctiefactoren,
)
from toptuinen.calculatie.forecast import forecast_series, linear_regression, moving_average
from toptuinen.calculatie.models import (
    CorrectionFactor,
    EstimationResult,
    GlobalParameters,
    HourLogEntry,
    Insight,
    LineItem,
    MachineUsageEntry,
    ProjectDuration,
    ScopeDeviation,
    UnitRate,
    VarianceResult,
    Voorcalculatie,
)
from toptuinen.calculatie.nacalculatie import compare_variance, get_deviation_status
from toptuinen.calculatie.scopes import Scope
from toptuinen.calculatie.voorcalculatie import calculate_project_duration, estimate

__all__ = [
    "CalculationResult",
    "Calculator",
    "DeviationStatus",
    "InsightType",
    "FactorCatalog",
    "find_rate",
    "load_correctiefactoren",
    "load_normuren",
    "merge_correctiefactoren",
    "forecast_series",
    "linear_regression",
    "moving_average",
    "CorrectionFactor",
    "EstimationResult",
    "GlobalParameters",
    "HourLogEntry",
    "Insight",
    "LineItem",
    "MachineUsageEntry",
    "ProjectDuration",
    "ScopeDeviation",
    "UnitRate",
    "VarianceResult",
    "Voorcalculatie",
    "compare_variance",
    "get_deviation_status",
    "Scope",
    "calculate_project_duration",
    "estimate",
]
