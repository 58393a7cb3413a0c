"""
Invoice correction lines (meerwerk / minderwerk) from a nacalculatie.
"""

from dataclasses import dataclass
from typing import List

from toptuinen.calculatie.formatting import format_number
from toptuinen.calculatie.models import Record, VarianceResult, round_half_up
from toptuinen.core.logging import get_logger

logger = get_logger("toptuinen.calculatie.correcties")

UURTARIEF = 45.0
CORRECTIE_DREMPEL = 5.0


@dataclass
class FactuurCorrectie(Record):
    omschrijving: str
    uren: float
    uurtarief: float
    bedrag: float
    afwijking_percentage: float


def bepaal_factuur_correcties(
    variance: VarianceResult,
    uurtarief: float = UURTARIEF,
    drempel: float = CORRECTIE_DREMPEL,
) -> List[FactuurCorrectie]:
    """
    Correction lines for an invoice.

    A line is produced only when the overall deviation is at least
    ``drempel`` percent and the amount is non-zero. Overruns become
    meerwerk (positive amount), underruns minderwerk (negative amount).
    """
    pct = variance.afwijking_percentage
    if abs(pct) < drempel:
        return []

    uren = variance.afwijking_uren
    bedrag = round_half_up(uren * uurtarief, 2)
    if bedrag == 0:
        return []

    if uren > 0:
        omschrijving = (
            f"Meerwerk: {format_number(uren)} uur extra "
            f"({format_number(pct, 1)}% afwijking)"
        )
    else:
        omschrijving = (
            f"Minderwerk: {format_number(abs(uren))} uur minder "
            f"({format_number(pct, 1)}% afwijking)"
        )

    logger.debug("Factuurcorrectie: %s (%s)", omschrijving, bedrag)
    return [FactuurCorrectie(
        omschrijving=omschrijving,
        uren=uren,
        uurtarief=uurtarief,
        bedrag=bedrag,
        afwijking_percentage=pct,
    )]
