"""
Dutch presentation helpers for hours, days, deviations and scope names.

Fractional numbers are written with a decimal comma ("2,5 uur").
"""

import math

from toptuinen.calculatie.models import round_half_up
from toptuinen.calculatie.scopes import Scope

SCOPE_LABELS = {
    Scope.GRONDWERK.value: "Grondwerk",
    Scope.BESTRATING.value: "Bestrating",
    Scope.BORDERS.value: "Borders",
    Scope.GRAS.value: "Gras",
    Scope.HOUTWERK.value: "Houtwerk",
    Scope.WATER_ELEKTRA.value: "Water & Elektra",
    Scope.SPECIALS.value: "Specials",
    Scope.GRAS_ONDERHOUD.value: "Gras Onderhoud",
    Scope.BORDERS_ONDERHOUD.value: "Borders Onderhoud",
    Scope.HEGGEN.value: "Heggen",
    Scope.BOMEN.value: "Bomen",
    Scope.OVERIG.value: "Overig",
}


def format_number(value: float, decimals: int = 2) -> str:
    """Round and drop trailing zeros: 2.50 -> '2,5', 20.0 -> '20'."""
    rounded = round_half_up(value, decimals)
    if rounded == 0:
        return "0"
    if rounded == int(rounded):
        return str(int(rounded))
    text = f"{rounded:.{decimals}f}".rstrip("0").rstrip(".")
    return text.replace(".", ",")


def format_bedrag(value: float) -> str:
    """Euro amount with Dutch separators: 1234.5 -> '€ 1.234,50'."""
    text = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if round_half_up(value, 2) < 0 else ""
    return f"{sign}€ {text}"


def _dagen_label(days: int) -> str:
    return "dag" if days == 1 else "dagen"


def format_hours_as_days(hours: float, hours_per_day: float = 8) -> str:
    """
    Express hours as working days plus remaining hours.

    format_hours_as_days(10) -> '1 dag, 2 uur'
    format_hours_as_days(8)  -> '1 dag'
    format_hours_as_days(5)  -> '5 uur'
    """
    if hours_per_day <= 0:
        raise ValueError(f"hours_per_day must be positive, got {hours_per_day}")

    days = math.floor(hours / hours_per_day)
    remaining = round_half_up(hours % hours_per_day, 1)

    if days == 0:
        return f"{format_number(remaining, 1)} uur"
    if remaining == 0:
        return f"{days} {_dagen_label(days)}"
    return f"{days} {_dagen_label(days)}, {format_number(remaining, 1)} uur"


def format_deviation(percentage: float) -> str:
    """Signed percentage: '+20%', '-7,5%', '0%'."""
    sign = "+" if round_half_up(percentage, 1) > 0 else ""
    return f"{sign}{format_number(percentage, 1)}%"


def format_uren(uren: float) -> str:
    """Hours as H:MM: 2.5 -> '2:30 uur', 3 -> '3 uur'."""
    hours = math.floor(uren)
    minutes = int(round_half_up((uren - hours) * 60))
    if minutes == 60:
        hours, minutes = hours + 1, 0
    if minutes == 0:
        return f"{hours} uur"
    return f"{hours}:{minutes:02d} uur"


def format_dagen(dagen: int) -> str:
    return f"{dagen} {_dagen_label(dagen)}"


def _capitalized_parts(scope: str):
    return [part[:1].upper() + part[1:] for part in scope.split("_")]


def get_scope_display_name(scope: str) -> str:
    """'water_elektra' -> 'Water/Elektra'."""
    return "/".join(_capitalized_parts(scope))


def format_scope_name(scope: str) -> str:
    """'gras_onderhoud' -> 'Gras Onderhoud'."""
    return " ".join(_capitalized_parts(scope))


def get_scope_label(scope: str) -> str:
    return SCOPE_LABELS.get(scope, scope)
