"""
Report formatters for calculatie results.

Each report takes the dict produced by the matching run_*() function and
renders it for the terminal (human), for programmatic use (JSON) or for
pasting into documents (markdown).
"""

import json
from typing import Any, Dict, List

from toptuinen.calculatie.formatting import (
    format_bedrag,
    format_dagen,
    format_deviation,
    format_hours_as_days,
    format_number,
    get_scope_label,
)
from toptuinen.core.output import OutputFormat, format_result, to_plain

_STATUS_LABELS = {
    "good": "GOED",
    "warning": "LET OP",
    "critical": "KRITIEK",
}

_INSIGHT_MARKERS = {
    "success": "[+]",
    "warning": "[!]",
    "critical": "[!!]",
}


def _status(value: str) -> str:
    return _STATUS_LABELS.get(value, value.upper())


def format_voorcalculatie_report(
    result: Dict[str, Any],
    fmt: OutputFormat = OutputFormat.HUMAN,
    uren_per_dag: float = 8,
) -> str:
    """Render the output of run_voorcalculatie()."""
    if fmt == OutputFormat.JSON:
        return json.dumps(to_plain(result), indent=2, default=str, ensure_ascii=False)

    per_scope = result.get("norm_uren_per_scope", {})
    duur = result.get("projectduur", {})
    totaal = result.get("norm_uren_totaal", 0.0)
    lines = []

    if fmt == OutputFormat.MARKDOWN:
        lines.extend(["# Voorcalculatie", "", "| Scope | Normuren |", "|-------|----------|"])
        for scope, uren in per_scope.items():
            lines.append(f"| {get_scope_label(scope)} | {format_number(uren)} |")
        lines.append(f"| **Totaal** | **{format_number(totaal)}** |")
        lines.append("")
        if duur:
            lines.append(
                f"- **Team**: {duur.get('team_grootte')} personen, "
                f"{format_number(duur.get('effectieve_uren_per_dag', 0))} uur per dag"
            )
            lines.append(f"- **Geschatte duur**: {format_dagen(duur.get('geschatte_dagen', 0))}")
            if duur.get("geschatte_dagen_met_buffer") is not None:
                lines.append(f"- **Met buffer**: {format_dagen(duur['geschatte_dagen_met_buffer'])}")
        return "\n".join(lines)

    title = "VOORCALCULATIE"
    lines.extend([title, "=" * len(title), ""])
    width = max([len(get_scope_label(s)) for s in per_scope] + [6])
    for scope, uren in per_scope.items():
        lines.append(f"  {get_scope_label(scope):<{width}}  {format_number(uren):>8} uur")
    lines.append(f"  {'Totaal':<{width}}  {format_number(totaal):>8} uur "
                 f"({format_hours_as_days(totaal, uren_per_dag)})")
    lines.append("")
    lines.append(
        f"Factoren: bereikbaarheid {format_number(result.get('bereikbaarheid_factor', 1.0))}, "
        f"achterstalligheid {format_number(result.get('achterstalligheid_factor', 1.0))}"
    )
    if duur:
        lines.append(
            f"Duur: {format_dagen(duur.get('geschatte_dagen', 0))} met "
            f"{duur.get('team_grootte')} personen"
        )
        if duur.get("geschatte_dagen_met_buffer") is not None:
            lines.append(f"Met buffer: {format_dagen(duur['geschatte_dagen_met_buffer'])}")
    return "\n".join(lines)


def format_nacalculatie_report(
    result: Dict[str, Any],
    fmt: OutputFormat = OutputFormat.HUMAN,
    project: str = "",
) -> str:
    """
    Render the output of run_nacalculatie().

    Args:
        result: run_nacalculatie() dict
        fmt: Output format
        project: Project name for the title

    Returns:
        Formatted report
    """
    if fmt == OutputFormat.JSON:
        return json.dumps(to_plain(result), indent=2, default=str, ensure_ascii=False)

    scopes: List[Dict[str, Any]] = result.get("afwijkingen_per_scope", [])
    insights: List[Dict[str, Any]] = result.get("insights", [])
    correcties: List[Dict[str, Any]] = result.get("factuur_correcties", [])
    lines = []

    if fmt == OutputFormat.MARKDOWN:
        title = f"Nacalculatie: {project}" if project else "Nacalculatie"
        lines.extend([f"# {title}", ""])
        lines.append(
            f"- **Uren**: {format_number(result['werkelijke_uren'])} van "
            f"{format_number(result['geplande_uren'])} gepland "
            f"({format_deviation(result['afwijking_percentage'])}, {_status(result['status'])})"
        )
        lines.append(
            f"- **Dagen**: {result['werkelijke_dagen']} van {result['geplande_dagen']} gepland"
        )
        lines.append(
            f"- **Machinekosten**: {format_bedrag(result['werkelijke_machine_kosten'])} van "
            f"{format_bedrag(result['geplande_machine_kosten'])} gepland"
        )
        lines.append("")

        if scopes:
            lines.extend([
                "## Per scope", "",
                "| Scope | Gepland | Werkelijk | Afwijking | Status |",
                "|-------|---------|-----------|-----------|--------|",
            ])
            for s in scopes:
                lines.append(
                    f"| {get_scope_label(s['scope'])} | {format_number(s['geplande_uren'])} | "
                    f"{format_number(s['werkelijke_uren'])} | "
                    f"{format_deviation(s['afwijking_percentage'])} | {_status(s['status'])} |"
                )
            lines.append("")

        if insights:
            lines.extend(["## Inzichten", ""])
            for i in insights:
                lines.append(f"- **{i['title']}**: {i['message']}")
            lines.append("")

        if correcties:
            lines.extend(["## Factuurcorrecties", ""])
            for c in correcties:
                lines.append(f"- {c['omschrijving']}: {format_bedrag(c['bedrag'])}")
        return "\n".join(lines).rstrip()

    title = f"NACALCULATIE: {project}" if project else "NACALCULATIE"
    lines.extend([title, "=" * len(title), ""])
    lines.append(
        f"Uren:    {format_number(result['werkelijke_uren'])} / "
        f"{format_number(result['geplande_uren'])} "
        f"({format_deviation(result['afwijking_percentage'])})  {_status(result['status'])}"
    )
    lines.append(
        f"Dagen:   {result['werkelijke_dagen']} / {result['geplande_dagen']} "
        f"({result['afwijking_dagen']:+d})"
    )
    lines.append(
        f"Machine: {format_bedrag(result['werkelijke_machine_kosten'])} / "
        f"{format_bedrag(result['geplande_machine_kosten'])} "
        f"({format_deviation(result['afwijking_machine_kosten_percentage'])})"
    )
    lines.append(
        f"Registraties: {result['aantal_registraties']} door "
        f"{result['aantal_medewerkers']} medewerkers"
    )
    lines.append("")

    if scopes:
        lines.append(f"PER SCOPE ({len(scopes)}):")
        for s in scopes:
            lines.append(
                f"  {get_scope_label(s['scope']):<20} {format_number(s['geplande_uren']):>8} -> "
                f"{format_number(s['werkelijke_uren']):>8}  "
                f"{format_deviation(s['afwijking_percentage']):>8}  {_status(s['status'])}"
            )
        lines.append("")

    if insights:
        lines.append(f"INZICHTEN ({len(insights)}):")
        for i in insights:
            marker = _INSIGHT_MARKERS.get(i["type"], "-")
            lines.append(f"  {marker} {i['title']}: {i['message']}")
        lines.append("")

    if correcties:
        lines.append("FACTUURCORRECTIES:")
        for c in correcties:
            lines.append(f"  {c['omschrijving']}  {format_bedrag(c['bedrag'])}")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_leerfeedback_report(
    result: Dict[str, Any],
    fmt: OutputFormat = OutputFormat.HUMAN,
) -> str:
    """Render the output of run_leerfeedback()."""
    if fmt == OutputFormat.JSON:
        return json.dumps(to_plain(result), indent=2, default=str, ensure_ascii=False)

    suggesties = result.get("suggesties", [])
    if not suggesties:
        return (
            f"Geen suggesties ({result.get('totaal_analyseerde_projecten', 0)} projecten "
            f"geanalyseerd)."
        )

    lines = []
    heading = "# Normuur suggesties" if fmt == OutputFormat.MARKDOWN else "NORMUUR SUGGESTIES"
    lines.extend([heading, ""])
    for s in suggesties:
        prefix = "## " if fmt == OutputFormat.MARKDOWN else ""
        lines.append(
            f"{prefix}{get_scope_label(s['scope'])}: {s['reden']} "
            f"(betrouwbaarheid {s['betrouwbaarheid']}, prioriteit {s.get('prioriteit', '-')})"
        )
        for a in s["activiteiten"]:
            bullet = "- " if fmt == OutputFormat.MARKDOWN else "  "
            lines.append(
                f"{bullet}{a['activiteit']}: {format_number(a['huidige_waarde'], 3)} -> "
                f"{format_number(a['gesuggereerde_waarde'], 3)} per {a['eenheid']} "
                f"({format_deviation(a['wijziging_percentage'])})"
            )
        for w in s.get("waarschuwingen", []):
            lines.append(f"  ! {w}")
        lines.append("")
    return "\n".join(lines).rstrip()


def format_forecast_report(
    result: Dict[str, Any],
    fmt: OutputFormat = OutputFormat.HUMAN,
) -> str:
    """Render the output of run_forecast()."""
    if fmt == OutputFormat.JSON:
        return json.dumps(to_plain(result), indent=2, default=str, ensure_ascii=False)
    return format_result(
        {"forecast": result.get("forecast", [])}, fmt, title="Forecast"
    )
