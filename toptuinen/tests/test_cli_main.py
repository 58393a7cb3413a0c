"""Tests for the top-level CLI assembly."""

import importlib
import json
import logging

from toptuinen.cli import main as cli_main
from toptuinen.cli.main import app


def test_main_app_help(cli_runner):
    result = cli_runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "hoveniersprojecten" in result.output


def test_version_output(cli_runner):
    result = cli_runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_unknown_command(cli_runner):
    result = cli_runner.invoke(app, ["nonexistent"])
    assert result.exit_code != 0


def test_calc_registered(cli_runner):
    result = cli_runner.invoke(app, ["calc", "--help"])
    assert result.exit_code == 0
    assert "voorcalculatie" in result.output
    assert "nacalculatie" in result.output


def test_quiet_json_output_is_parseable(cli_runner, write_input):
    path = write_input({
        "scope_data": {"gras": {"oppervlakte": 50, "type": "graszoden"}},
        "algemeen": {"bereikbaarheid": "goed"},
    })
    result = cli_runner.invoke(app, ["--quiet", "calc", "voorcalculatie", str(path), "--format", "json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["norm_uren_totaal"] == 6.0


def test_broken_module_is_logged(monkeypatch, caplog):
    def fail(name, package=None):
        raise ImportError(f"No module named {name!r}")

    monkeypatch.setattr(importlib, "import_module", fail)
    with caplog.at_level(logging.WARNING, logger="toptuinen.cli"):
        cli_main._register_modules()
    assert "toptuinen.calculatie.cli" in caplog.text
    assert "calc" in caplog.text
