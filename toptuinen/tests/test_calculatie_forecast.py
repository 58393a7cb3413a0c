"""Tests for regression, moving average and monthly forecast."""

import pytest

from toptuinen.calculatie.forecast import (
    forecast_monthly, forecast_series, linear_regression, moving_average, next_month,
)


class TestLinearRegression:
    def test_empty(self):
        fit = linear_regression([])
        assert (fit.slope, fit.intercept) == (0, 0)

    def test_repeated_x(self):
        fit = linear_regression([(2, 4), (2, 6), (2, 8)])
        assert fit.slope == 0
        assert fit.intercept == pytest.approx(6)

    def test_line(self):
        fit = linear_regression([(0, 1), (1, 3), (2, 5)])
        assert fit.slope == pytest.approx(2)
        assert fit.intercept == pytest.approx(1)
        assert fit.predict(3) == pytest.approx(7)


class TestForecastSeries:
    def test_rising(self):
        assert forecast_series([10, 20, 30]) == [40, 50, 60]

    def test_never_negative(self):
        assert forecast_series([30, 20, 10], perioden=3) == [0, 0, 0]

    def test_empty(self):
        assert forecast_series([]) == [0, 0, 0]

    def test_uses_recent_history_only(self):
        assert forecast_series([500, 500, 1, 2, 3], perioden=2, historie=3) == [4, 5]

    def test_half_rounds_up(self):
        # slope 1, intercept 0.5: the next period predicts 2.5
        assert forecast_series([0.5, 1.5], perioden=1) == [3]


class TestMovingAverage:
    def test_window(self):
        assert moving_average([1, 2, 3, 4], 3) == [None, None, 2.0, 3.0]

    def test_short_series(self):
        assert moving_average([5], 3) == [None]

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            moving_average([1, 2], 0)


class TestNextMonth:
    def test_year_rollover(self):
        assert next_month("2024-12") == "2025-01"

    def test_padding(self):
        assert next_month("2024-08") == "2024-09"

    @pytest.mark.parametrize("bad", ["", "2024", "2024-13", "mei"])
    def test_invalid(self, bad):
        with pytest.raises(ValueError):
            next_month(bad)


def test_forecast_monthly():
    trend = [
        {"maand": "2024-10", "totaal": 10, "omzet": 1000},
        {"maand": "2024-11", "totaal": 20, "omzet": 2000},
        {"maand": "2024-12", "totaal": 30, "omzet": 3000},
    ]
    result = forecast_monthly(trend, perioden=2)
    assert result["trend"][2]["moving_avg_totaal"] == 20.0
    assert result["trend"][0]["moving_avg_omzet"] is None
    assert result["forecast"] == [
        {"maand": "2025-01", "forecast_totaal": 40, "forecast_omzet": 4000},
        {"maand": "2025-02", "forecast_totaal": 50, "forecast_omzet": 5000},
    ]


def test_forecast_monthly_empty():
    assert forecast_monthly([]) == {"trend": [], "forecast": []}
