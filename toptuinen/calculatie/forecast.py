"""
Trend forecasting over monthly aggregates.

Ordinary least-squares regression on (index, value) pairs, a trailing
moving average, and a month-by-month forecast built on both.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from toptuinen.calculatie.models import round_half_up, to_number
from toptuinen.core.logging import get_logger

logger = get_logger("toptuinen.calculatie.forecast")

Point = Tuple[float, float]


@dataclass
class RegressionResult:
    slope: float
    intercept: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


def linear_regression(points: Sequence[Point]) -> RegressionResult:
    """
    Least-squares fit of y = slope * x + intercept.

    Empty input gives (0, 0); when every x is identical the slope is 0 and
    the intercept is the mean of y.
    """
    n = len(points)
    if n == 0:
        return RegressionResult(slope=0.0, intercept=0.0)

    sum_x = sum(x for x, _ in points)
    sum_y = sum(y for _, y in points)
    sum_xy = sum(x * y for x, y in points)
    sum_xx = sum(x * x for x, _ in points)

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return RegressionResult(slope=0.0, intercept=sum_y / n)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return RegressionResult(slope=slope, intercept=intercept)


def forecast_series(
    values: Sequence[float], perioden: int = 3, historie: int = 6
) -> List[int]:
    """
    Project the next ``perioden`` values from the last ``historie`` values.

    Forecasts are rounded to whole numbers and never negative.
    """
    recent = list(values)[-historie:] if historie > 0 else []
    if not recent:
        return [0] * perioden

    fit = linear_regression([(float(i), float(v)) for i, v in enumerate(recent)])
    start = len(recent)
    return [max(0, int(round_half_up(fit.predict(start + i)))) for i in range(perioden)]


def moving_average(values: Sequence[float], window: int = 3) -> List[Optional[float]]:
    """Trailing average; None until ``window`` values are available."""
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")

    result: List[Optional[float]] = []
    for i in range(len(values)):
        if i + 1 < window:
            result.append(None)
        else:
            chunk = values[i + 1 - window:i + 1]
            result.append(round_half_up(sum(chunk) / window, 1))
    return result


def next_month(maand: str) -> str:
    """'2024-12' -> '2025-01'."""
    try:
        year, month = (int(part) for part in maand.split("-")[:2])
    except ValueError:
        raise ValueError(f"Invalid month: {maand!r}, expected YYYY-MM") from None
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {maand!r}, expected YYYY-MM")
    if month == 12:
        return f"{year + 1}-01"
    return f"{year}-{month + 1:02d}"


def forecast_monthly(
    trend: Sequence[Mapping[str, Any]],
    perioden: int = 3,
    historie: int = 6,
    voortschrijdend: int = 3,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Forecast monthly totals and revenue.

    Args:
        trend: monthly aggregates {maand: 'YYYY-MM', totaal, omzet}, oldest first
        perioden: months to forecast
        historie: how many recent months feed the regression
        voortschrijdend: moving-average window

    Returns:
        {"trend": input rows plus moving_avg_totaal / moving_avg_omzet,
         "forecast": [{maand, forecast_totaal, forecast_omzet}, ...]}
    """
    totalen = [to_number(row.get("totaal")) for row in trend]
    omzet = [to_number(row.get("omzet")) for row in trend]

    avg_totaal = moving_average(totalen, voortschrijdend)
    avg_omzet = moving_average(omzet, voortschrijdend)
    enriched = [
        dict(row, moving_avg_totaal=avg_totaal[i], moving_avg_omzet=avg_omzet[i])
        for i, row in enumerate(trend)
    ]

    forecast = []
    if trend:
        fc_totaal = forecast_series(totalen, perioden, historie)
        fc_omzet = forecast_series(omzet, perioden, historie)
        maand = str(trend[-1].get("maand", ""))
        for i in range(perioden):
            maand = next_month(maand)
            forecast.append({
                "maand": maand,
                "forecast_totaal": fc_totaal[i],
                "forecast_omzet": fc_omzet[i],
            })

    logger.debug("Forecast over %d months -> %d periods", len(trend), len(forecast))
    return {"trend": enriched, "forecast": forecast}
