"""Calculatie CLI sub-commands."""

from pathlib import Path
from typing import Any, Dict, Optional

import typer

from toptuinen.core.output import OutputFormat

app = typer.Typer(no_args_is_help=True)


def _load_input(path: Path) -> Dict[str, Any]:
    """Read a YAML or JSON input file into a dict."""
    import yaml

    if not path.exists():
        typer.echo(f"Error: input file not found: {path}")
        raise typer.Exit(code=1)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        typer.echo(f"Error: cannot parse {path}: {exc}")
        raise typer.Exit(code=1)

    if not isinstance(data, dict):
        typer.echo(f"Error: {path} must contain a mapping at the top level")
        raise typer.Exit(code=1)
    return data


def _run(func, params: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return func(params)
    except FileNotFoundError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1)
    except ValueError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Calculation commands
# ---------------------------------------------------------------------------

@app.command("voorcalculatie")
def voorcalculatie(
    input_file: Path = typer.Argument(..., help="Offerte data (YAML or JSON)"),
    team_grootte: Optional[int] = typer.Option(None, "--team-grootte", "-t", help="Team size: 2, 3 or 4"),
    buffer: Optional[float] = typer.Option(None, "--buffer", help="Duration buffer percentage"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """Estimate normuren per scope and the project duration."""
    from toptuinen.calculatie.output import format_voorcalculatie_report
    from toptuinen.calculatie.runner import run_voorcalculatie
    from toptuinen.core import get_calculatie_settings

    params = _load_input(input_file)
    if team_grootte is not None:
        params["team_grootte"] = team_grootte
    if buffer is not None:
        params["buffer_percentage"] = buffer

    result = _run(run_voorcalculatie, params)
    uren_per_dag = get_calculatie_settings()["uren_per_dag_weergave"]
    typer.echo(format_voorcalculatie_report(result, fmt, uren_per_dag=uren_per_dag))


@app.command("nacalculatie")
def nacalculatie(
    input_file: Path = typer.Argument(..., help="Voorcalculatie plus uren/machine registraties (YAML or JSON)"),
    project: str = typer.Option("", "--project", "-p", help="Project name for the report title"),
    uurtarief: Optional[float] = typer.Option(None, "--uurtarief", help="Hourly rate for invoice corrections"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """Compare planned and actual hours."""
    from toptuinen.calculatie.output import format_nacalculatie_report
    from toptuinen.calculatie.runner import run_nacalculatie

    params = _load_input(input_file)
    if uurtarief is not None:
        params["uurtarief"] = uurtarief

    result = _run(run_nacalculatie, params)
    typer.echo(format_nacalculatie_report(result, fmt, project=project or params.get("project", "")))


@app.command("forecast")
def forecast(
    input_file: Path = typer.Argument(..., help="Monthly trend data (YAML or JSON)"),
    perioden: Optional[int] = typer.Option(None, "--perioden", help="Months to forecast"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """Forecast the coming months from monthly totals."""
    from toptuinen.calculatie.output import format_forecast_report
    from toptuinen.calculatie.runner import run_forecast

    params = _load_input(input_file)
    if perioden is not None:
        params["perioden"] = perioden

    result = _run(run_forecast, params)
    typer.echo(format_forecast_report(result, fmt))


@app.command("leerfeedback")
def leerfeedback(
    input_file: Path = typer.Argument(..., help="Past nacalculaties (YAML or JSON)"),
    fmt: OutputFormat = typer.Option(OutputFormat.HUMAN, "--format", "-f", help="Output format"),
):
    """Suggest normuur adjustments from past projects."""
    from toptuinen.calculatie.output import format_leerfeedback_report
    from toptuinen.calculatie.runner import run_leerfeedback

    result = _run(run_leerfeedback, _load_input(input_file))
    typer.echo(format_leerfeedback_report(result, fmt))


# ---------------------------------------------------------------------------
# Catalog commands
# ---------------------------------------------------------------------------

@app.command("factoren")
def factoren(
    type_: Optional[str] = typer.Option(None, "--type", help="Only show one factor type (e.g. diepte)"),
):
    """List the system correction factors."""
    from toptuinen.calculatie.catalog import load_correctiefactoren

    try:
        factors = load_correctiefactoren()
    except FileNotFoundError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1)

    if type_:
        factors = [f for f in factors if f.type == type_.lower()]
    if not factors:
        typer.echo("No correctiefactoren found.")
        return

    for f in factors:
        typer.echo(f"  {f.type:<20} {f.waarde:<12} {f.factor:>6.2f}")


@app.command("normuren")
def normuren(
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help="Only show one scope"),
):
    """List the default unit rates."""
    from toptuinen.calculatie.catalog import load_normuren

    try:
        rates = load_normuren()
    except FileNotFoundError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(code=1)

    if scope:
        rates = [r for r in rates if r.scope == scope.lower()]
    if not rates:
        typer.echo("No normuren found.")
        return

    for r in rates:
        typer.echo(
            f"  {r.scope:<18} {r.activiteit:<24} {r.normuur_per_eenheid:>6.2f} uur/{r.eenheid}"
        )
