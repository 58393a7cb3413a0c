"""Tests for the per-scope hour formulas."""

import pytest

from toptuinen.calculatie.catalog import FactorCatalog, rates_for_scope
from toptuinen.calculatie.scopes import (
    LINE_ITEM_SCOPES, Scope, calculate_scope_hours, get_scope_formula,
    missing_formulas, parse_scope, registered_scopes, scope_formula,
)


def hours(scope, data, normuren, factoren):
    return calculate_scope_hours(scope, data, rates_for_scope(normuren, scope), factoren)


def test_every_scope_is_covered():
    assert missing_formulas() == []


def test_line_item_scopes_have_no_formula():
    for scope in LINE_ITEM_SCOPES:
        assert get_scope_formula(scope) is None
        assert scope not in registered_scopes()


def test_duplicate_registration_raises():
    with pytest.raises(ValueError, match="already registered"):
        scope_formula(Scope.GRAS)(lambda data, rates, factors: 0.0)


class TestParseScope:
    def test_string(self):
        assert parse_scope("Gras_Onderhoud") is Scope.GRAS_ONDERHOUD

    def test_member(self):
        assert parse_scope(Scope.HEGGEN) is Scope.HEGGEN

    def test_unknown(self):
        assert parse_scope("zwembad") is None
        assert parse_scope(None) is None


class TestAanleg:
    def test_grondwerk(self, normuren, factoren):
        data = {"oppervlakte": 10, "diepte": "standaard"}
        assert hours("grondwerk", data, normuren, factoren) == pytest.approx(2.25)

    def test_grondwerk_with_afvoer(self, normuren, factoren):
        data = {"oppervlakte": 10, "diepte": "standaard", "afvoerGrond": True}
        assert hours("grondwerk", data, normuren, factoren) == pytest.approx(2.55)

    def test_grondwerk_zwaar_afvoer(self, normuren, factoren):
        # 10 * 0.15 * 2.0 + 10 * 0.5 * 0.1
        data = {"oppervlakte": 10, "diepte": "zwaar", "afvoer_grond": True}
        assert hours("grondwerk", data, normuren, factoren) == pytest.approx(3.5)

    def test_bestrating(self, normuren, factoren):
        data = {"oppervlakte": 20, "typeBestrating": "klinker", "snijwerk": "hoog"}
        assert hours("bestrating", data, normuren, factoren) == pytest.approx(14.6)

    def test_bestrating_defaults_to_tegels(self, normuren, factoren):
        assert hours("bestrating", {"oppervlakte": 10}, normuren, factoren) == pytest.approx(4.5)

    def test_borders(self, normuren, factoren):
        data = {"oppervlakte": 10, "beplantingsintensiteit": "gemiddeld"}
        assert hours("borders", data, normuren, factoren) == pytest.approx(4.5)

    def test_gras(self, normuren, factoren):
        assert hours("gras", {"oppervlakte": 50, "type": "graszoden"}, normuren, factoren) == pytest.approx(6.0)

    def test_schutting(self, normuren, factoren):
        data = {"afmeting": 10, "type_houtwerk": "schutting", "fundering": "standaard"}
        assert hours("houtwerk", data, normuren, factoren) == pytest.approx(10.5)

    def test_pergola_sits_on_four_posts(self, normuren, factoren):
        data = {"afmeting": 1, "typeHoutwerk": "pergola"}
        assert hours("houtwerk", data, normuren, factoren) == pytest.approx(6.0)

    def test_water_elektra(self, normuren, factoren):
        data = {"aantalPunten": 4, "sleuvenNodig": True}
        assert hours("water_elektra", data, normuren, factoren) == pytest.approx(5.6)

    def test_water_elektra_without_sleuven(self, normuren, factoren):
        assert hours("water_elektra", {"aantal_punten": 4}, normuren, factoren) == pytest.approx(2.0)


class TestOnderhoud:
    def test_gras_onderhoud(self, normuren, factoren):
        data = {"maaien": True, "grasOppervlakte": 500}
        assert hours("gras_onderhoud", data, normuren, factoren) == pytest.approx(10.0)

    def test_gras_onderhoud_without_maaien(self, normuren, factoren):
        assert hours("gras_onderhoud", {"grasOppervlakte": 500}, normuren, factoren) == 0.0

    def test_borders_onderhoud(self, normuren, factoren):
        data = {"borderOppervlakte": 20, "onderhoudsintensiteit": "veel"}
        assert hours("borders_onderhoud", data, normuren, factoren) == pytest.approx(5.0)

    def test_heggen_default_dimensions(self, normuren, factoren):
        assert hours("heggen", {"lengte": 10}, normuren, factoren) == pytest.approx(0.75)

    def test_bomen_zwaar(self, normuren, factoren):
        data = {"aantalBomen": 2, "snoei": "zwaar"}
        assert hours("bomen", data, normuren, factoren) == pytest.approx(3.0)


class TestFallbackConstants:
    """Without a catalog every formula uses its built-in normuur."""

    def test_grondwerk(self):
        assert calculate_scope_hours("grondwerk", {"oppervlakte": 10}, [], FactorCatalog()) == pytest.approx(2.5)

    def test_grondwerk_with_afvoer(self):
        data = {"oppervlakte": 10, "afvoerGrond": True}
        assert calculate_scope_hours("grondwerk", data, [], FactorCatalog()) == pytest.approx(2.8)

    def test_gras_zaaien(self):
        data = {"oppervlakte": 50, "type": "zaaien"}
        assert calculate_scope_hours("gras", data, [], FactorCatalog()) == pytest.approx(2.5)

    def test_bomen_licht(self):
        assert calculate_scope_hours("bomen", {"aantal_bomen": 2}, [], FactorCatalog()) == pytest.approx(1.0)


class TestMalformedInput:
    def test_missing_data(self, normuren, factoren):
        assert hours("grondwerk", None, normuren, factoren) == 0.0

    def test_negative_quantity(self, normuren, factoren):
        assert hours("gras", {"oppervlakte": -50}, normuren, factoren) == 0.0

    def test_non_numeric_quantity(self, normuren, factoren):
        assert hours("bomen", {"aantalBomen": "twee"}, normuren, factoren) == 0.0

    def test_unknown_scope(self, normuren, factoren):
        assert hours("zwembad", {"oppervlakte": 10}, normuren, factoren) == 0.0

    @pytest.mark.parametrize("bag", [5, "oppervlakte", ["oppervlakte", 10]])
    def test_bag_that_is_not_a_mapping(self, bag, normuren, factoren):
        assert hours("grondwerk", bag, normuren, factoren) == 0.0
        assert hours("gras", bag, normuren, factoren) == 0.0
