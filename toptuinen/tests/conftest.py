"""
Shared test fixtures for toptuinen.

Provides the shipped catalogs, a sample plan, a CLI runner and a helper for
writing YAML input files.
"""

import pytest
import yaml

from toptuinen.calculatie.catalog import FactorCatalog, load_correctiefactoren, load_normuren
from toptuinen.calculatie.models import HourLogEntry, Voorcalculatie
from toptuinen.core.logging import reset_log_level


@pytest.fixture(autouse=True)
def _restore_log_level():
    """CLI flags like --quiet change logging globally; undo after each test."""
    yield
    reset_log_level()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture
def normuren():
    """The default unit-rate catalog."""
    return load_normuren()


@pytest.fixture
def factoren():
    """The system correction factors as a lookup catalog."""
    return FactorCatalog(load_correctiefactoren())


@pytest.fixture
def plan():
    """A 40-hour plan over two scopes, 3 days."""
    return Voorcalculatie(
        norm_uren_totaal=40.0,
        geschatte_dagen=3,
        norm_uren_per_scope={"grondwerk": 20.0, "bestrating": 20.0},
    )


@pytest.fixture
def logs_48():
    """48 logged hours by two workers over three days; one entry without scope."""
    return [
        HourLogEntry("2024-05-01", "Jan", 8, "grondwerk"),
        HourLogEntry("2024-05-01", "Piet", 8, "grondwerk"),
        HourLogEntry("2024-05-02", "Jan", 8, "bestrating"),
        HourLogEntry("2024-05-02", "Piet", 8, "bestrating"),
        HourLogEntry("2024-05-03", "Jan", 8, "bestrating"),
        HourLogEntry("2024-05-03", "Piet", 8),
    ]


@pytest.fixture
def write_input(tmp_path):
    """Write a dict as YAML and return the path."""

    def _write(data, name="input.yaml"):
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def offerte():
    """run_voorcalculatie params: 50 m2 graszoden, 6 normuren."""
    return {
        "scope_data": {"gras": {"oppervlakte": 50, "type": "graszoden"}},
        "algemeen": {"bereikbaarheid": "goed"},
    }


@pytest.fixture
def nacalculatie_params():
    """run_nacalculatie params: 48 logged hours against a 40-hour plan."""
    return {
        "voorcalculatie": {
            "norm_uren_totaal": 40,
            "geschatte_dagen": 3,
            "norm_uren_per_scope": {"grondwerk": 20, "bestrating": 20},
        },
        "uren_registraties": [
            {"datum": "2024-05-01", "medewerker": "Jan", "uren": 24, "scope": "grondwerk"},
            {"datum": "2024-05-02", "medewerker": "Piet", "uren": 24, "scope": "bestrating"},
        ],
    }
