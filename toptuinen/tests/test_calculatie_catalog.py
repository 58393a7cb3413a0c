"""Tests for unit-rate and correction-factor catalogs."""

import pytest

from toptuinen.calculatie.catalog import (
    FactorCatalog, find_rate, load_correctiefactoren, load_normuren,
    merge_correctiefactoren, rate_value, rates_for_scope,
)
from toptuinen.calculatie.models import CorrectionFactor, UnitRate
from toptuinen.calculatie.scopes import Scope


class TestLoadNormuren:
    def test_default_catalog_size(self, normuren):
        assert len(normuren) == 38

    def test_every_rate_has_a_key(self, normuren):
        assert all(r.activiteit_key for r in normuren)

    def test_every_rate_belongs_to_a_known_scope(self, normuren):
        known = {s.value for s in Scope}
        assert {r.scope for r in normuren} <= known

    def test_values(self, normuren):
        rates = {r.activiteit: r.normuur_per_eenheid for r in normuren}
        assert rates["Ontgraven standaard"] == 0.25
        assert rates["Pergola bouwen"] == 4.0
        assert rates["Boom snoeien zwaar"] == 1.5

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Catalog file not found"):
            load_normuren(tmp_path / "nope.yaml")

    def test_custom_file(self, tmp_path):
        path = tmp_path / "normuren.yaml"
        path.write_text(
            "normuren:\n  gras:\n    - {activiteit: Gras zaaien, normuur_per_eenheid: 0.07}\n",
            encoding="utf-8",
        )
        rates = load_normuren(path)
        assert rates == [UnitRate(scope="gras", activiteit="Gras zaaien", normuur_per_eenheid=0.07)]


class TestLoadCorrectiefactoren:
    def test_default_catalog_size(self):
        assert len(load_correctiefactoren()) == 30

    def test_values(self, factoren):
        assert factoren.get("bereikbaarheid", "slecht") == 1.5
        assert factoren.get("diepte", "zwaar") == 2.0
        assert factoren.get("intensiteit", "weinig") == 0.8
        assert factoren.get("achterstalligheid", "hoog") == 1.6

    def test_types(self, factoren):
        assert factoren.types()[:3] == ["bereikbaarheid", "complexiteit", "intensiteit"]


class TestMergeCorrectiefactoren:
    def test_override_replaces_in_place(self):
        system = [CorrectionFactor("diepte", "licht", 1.0), CorrectionFactor("diepte", "zwaar", 2.0)]
        merged = merge_correctiefactoren(system, [CorrectionFactor("diepte", "zwaar", 2.5)])
        assert merged == [CorrectionFactor("diepte", "licht", 1.0), CorrectionFactor("diepte", "zwaar", 2.5)]

    def test_override_only_keys_appended(self):
        system = [CorrectionFactor("diepte", "licht", 1.0)]
        extra = CorrectionFactor("helling", "steil", 1.4)
        assert merge_correctiefactoren(system, [extra]) == system + [extra]

    def test_no_overrides(self):
        system = [CorrectionFactor("diepte", "licht", 1.0)]
        assert merge_correctiefactoren(system, []) == system


class TestFactorCatalog:
    def test_unknown_defaults_to_one(self):
        catalog = FactorCatalog()
        assert catalog.get("bereikbaarheid", "onbekend") == 1.0
        assert catalog.get("bestaat", "niet") == 1.0

    def test_none_value_defaults_to_one(self, factoren):
        assert factoren.get("achterstalligheid", None) == 1.0

    def test_case_insensitive_lookup(self, factoren):
        assert factoren.get("Bereikbaarheid", "Beperkt") == 1.2

    def test_first_entry_wins(self):
        catalog = FactorCatalog([
            CorrectionFactor("snijwerk", "hoog", 1.4),
            CorrectionFactor("snijwerk", "hoog", 9.9),
        ])
        assert catalog.get("snijwerk", "hoog") == 1.4
        assert len(catalog) == 2

    def test_coerce(self, factoren):
        assert FactorCatalog.coerce(factoren) is factoren
        assert len(FactorCatalog.coerce(None)) == 0


class TestFindRate:
    RATES = [
        UnitRate("bestrating", "Tegels leggen", 0.35, "m2", "tegel"),
        UnitRate("bestrating", "Klinkers leggen", 0.45, "m2", "klinker"),
        UnitRate("bestrating", "Oude klinkers herleggen", 0.6, "m2"),
    ]

    def test_key_match(self):
        assert find_rate(self.RATES, ["klinker"]).normuur_per_eenheid == 0.45

    def test_key_match_beats_substring(self):
        rate = find_rate(self.RATES, ["klinker"], [["herleggen"]])
        assert rate.activiteit == "Klinkers leggen"

    def test_legacy_substring_case_insensitive(self):
        assert find_rate(self.RATES, [], [["HERLEGGEN"]]).normuur_per_eenheid == 0.6

    def test_legacy_groups_tried_in_order(self):
        assert find_rate(self.RATES, ["natuursteen"], [["natuursteen"], ["leggen"]]).activiteit == "Tegels leggen"

    def test_all_terms_in_group_must_match(self):
        assert find_rate(self.RATES, [], [["klinkers", "oude"]]).activiteit == "Oude klinkers herleggen"
        assert find_rate(self.RATES, [], [["tegels", "oude"]]) is None

    def test_no_match(self):
        assert find_rate(self.RATES, ["zandbed"], [["zandbed"]]) is None

    def test_rates_for_scope(self, normuren):
        assert len(rates_for_scope(normuren, "heggen")) == 2
        assert rates_for_scope(normuren, "onbekend") == []


class TestRateValue:
    def test_matched(self):
        assert rate_value(UnitRate("gras", "Maaien", 0.02), 0.5) == 0.02

    def test_unmatched_uses_fallback(self):
        assert rate_value(None, 0.25) == 0.25

    def test_zero_rate_uses_fallback(self):
        assert rate_value(UnitRate("gras", "Maaien", 0.0), 0.02) == 0.02
