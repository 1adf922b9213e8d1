import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

logger = logging.getLogger(__name__)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero (2.5 -> 3), unlike the built-in round().

    Scores are compared against thresholds, so 49.5 must become 50 rather
    than the banker's-rounded 50/48 alternation of round().
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def to_optional_float(value: Any) -> Optional[float]:
    """Convert a Numeric/Decimal/str column value to float, keeping None as None."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"Could not convert {value!r} to float, treating as unknown")
        return None


def normalize_term(term: str) -> str:
    """Lowercase and trim a skill or category label for comparison."""
    return str(term).lower().strip()
