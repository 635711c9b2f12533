from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List
import logging

logger = logging.getLogger(__name__)


def mean(values: Iterable[float]) -> float:
    """
    Arithmetic mean of the given values

    Args:
        values: Numbers to average

    Returns:
        The mean, or 0.0 when there are no values
    """
    items: List[float] = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


def round_half_up(value: float, places: int = 2) -> float:
    """Round with halves going up (2.125 -> 2.13), unlike round()"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def safe_ratio(numerator: float, denominator: float) -> float:
    """Divide, returning 0.0 for a zero denominator"""
    if denominator == 0:
        return 0.0
    return numerator / denominator
