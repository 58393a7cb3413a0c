"""Tests for calculatie base classes and data records."""

import pytest

from toptuinen.calculatie.base import (
    CalculationResult, Calculator, DeviationStatus, InsightType,
)
from toptuinen.calculatie.models import (
    CorrectionFactor, GlobalParameters, HourLogEntry, Insight, LineItem,
    MachineUsageEntry, UnitRate, Voorcalculatie, round_half_up, to_flag, to_number,
    to_text,
)


def test_deviation_status_values():
    assert DeviationStatus.GOOD.value == "good"
    assert DeviationStatus.WARNING.value == "warning"
    assert DeviationStatus.CRITICAL.value == "critical"


def test_insight_type_values():
    assert {t.value for t in InsightType} == {"success", "warning", "critical"}


def test_calculation_result_to_dict_flattens_data():
    r = CalculationResult(calculation_type="test", warnings=["w1"], data={"uren": 2.5})
    d = r.to_dict()
    assert d["calculation_type"] == "test"
    assert d["warnings"] == ["w1"]
    assert d["notes"] == []
    assert d["uren"] == 2.5


def test_calculator_is_abstract():
    with pytest.raises(TypeError):
        Calculator()


def test_record_to_dict_serializes_enums():
    i = Insight(type=InsightType.WARNING, title="t", message="m", scope="gras")
    assert i.to_dict() == {"type": "warning", "title": "t", "message": "m", "scope": "gras"}


class TestToNumber:
    def test_int_and_float(self):
        assert to_number(3) == 3.0
        assert to_number(2.5) == 2.5

    def test_numeric_string_with_comma(self):
        assert to_number("2,5") == 2.5

    def test_garbage_returns_default(self):
        assert to_number("abc") == 0.0
        assert to_number(None, 7) == 7
        assert to_number([1]) == 0.0

    def test_bool_is_not_a_number(self):
        assert to_number(True) == 0.0

    def test_nan_returns_default(self):
        assert to_number(float("nan"), 1.0) == 1.0

    def test_integer_too_large_for_float(self):
        assert to_number(10 ** 400) == 0.0
        assert to_number(-(10 ** 400), 5.0) == 5.0


class TestRoundHalfUp:
    def test_halves_go_up(self):
        assert round_half_up(0.125, 2) == 0.13
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_negative_halves_go_towards_zero(self):
        assert round_half_up(-2.5) == -2

    def test_plain_values(self):
        assert round_half_up(14.6, 1) == 14.6
        assert round_half_up(33.333, 1) == 33.3

    def test_huge_value_returned_unchanged(self):
        assert round_half_up(1e308, 2) == 1e308


class TestToTextAndFlag:
    def test_text_lower_cased(self):
        assert to_text("  Zwaar ") == "zwaar"

    def test_text_default(self):
        assert to_text("", "standaard") == "standaard"
        assert to_text(5, "standaard") == "standaard"

    def test_flag(self):
        assert to_flag(True) is True
        assert to_flag("ja") is True
        assert to_flag("nee") is False
        assert to_flag(None) is False
        assert to_flag(1) is False


class TestFromDict:
    def test_unit_rate(self):
        r = UnitRate.from_dict({
            "scope": "gras", "activiteit": "Graszoden leggen",
            "activiteit_key": "Graszoden", "normuur_per_eenheid": "0.12", "eenheid": "m2",
        })
        assert r.normuur_per_eenheid == 0.12
        assert r.activiteit_key == "graszoden"
        assert r.identifier == "graszoden"

    def test_unit_rate_identifier_without_key(self):
        r = UnitRate(scope="gras", activiteit="Gras zaaien", normuur_per_eenheid=0.05)
        assert r.identifier == "Gras zaaien"

    def test_correction_factor_defaults_to_one(self):
        f = CorrectionFactor.from_dict({"type": "Diepte", "waarde": "Zwaar"})
        assert (f.type, f.waarde, f.factor) == ("diepte", "zwaar", 1.0)

    def test_global_parameters_defaults(self):
        g = GlobalParameters.from_dict(None)
        assert g.bereikbaarheid == "goed"
        assert g.achterstalligheid is None

    def test_line_item_negative_quantity_clamped(self):
        r = LineItem.from_dict({"scope": "overig", "type": "Arbeid", "hoeveelheid": -3})
        assert r.type == "arbeid"
        assert r.hoeveelheid == 0.0

    def test_hour_log_entry_bad_hours(self):
        e = HourLogEntry.from_dict({"datum": "2024-05-01", "medewerker": "Jan", "uren": "veel"})
        assert e.uren == 0.0
        assert e.scope is None

    def test_machine_usage_entry(self):
        m = MachineUsageEntry.from_dict({"datum": "2024-05-01", "uren": 4, "kosten": 120})
        assert m.kosten == 120.0

    def test_voorcalculatie(self):
        v = Voorcalculatie.from_dict({
            "norm_uren_totaal": 40, "geschatte_dagen": 3,
            "norm_uren_per_scope": {"gras": 10, "borders": "x"},
        })
        assert v.norm_uren_totaal == 40.0
        assert v.geschatte_dagen == 3
        assert v.norm_uren_per_scope == {"gras": 10.0, "borders": 0.0}
        assert v.team_grootte == 2

    def test_voorcalculatie_per_scope_list_ignored(self):
        v = Voorcalculatie.from_dict({"norm_uren_totaal": 10, "norm_uren_per_scope": ["gras"]})
        assert v.norm_uren_totaal == 10.0
        assert v.norm_uren_per_scope == {}

    @pytest.mark.parametrize("cls", [
        UnitRate, CorrectionFactor, GlobalParameters, LineItem,
        HourLogEntry, MachineUsageEntry, Voorcalculatie,
    ])
    def test_non_mapping_reads_as_empty(self, cls):
        assert cls.from_dict(["gras"]) == cls.from_dict({})

    @pytest.mark.parametrize("scope", [["gras"], {"naam": "gras"}, 3, "   "])
    def test_scope_must_be_text(self, scope):
        e = HourLogEntry.from_dict({"datum": "2024-05-01", "uren": 4, "scope": scope})
        m = MachineUsageEntry.from_dict({"datum": "2024-05-01", "uren": 4, "scope": scope})
        assert e.scope is None
        assert m.scope is None

    def test_scope_stripped(self):
        assert HourLogEntry.from_dict({"uren": 1, "scope": " gras "}).scope == "gras"
