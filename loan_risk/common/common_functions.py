"""Common numeric helpers used across scoring modules."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import logging
from typing import Any


logger = logging.getLogger(__name__)


def to_decimal(value: Any) -> Decimal:
    """Convert a number to ``Decimal`` through its string form.

    Raises:
        ValueError: If the value is not numeric.
    """
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        logger.exception("Invalid numeric input value=%s", value)
        raise ValueError("Invalid numeric value: {0!r}".format(value))


def round_half_up(value: Any) -> int:
    """Round to the nearest integer with halves rounded away from zero.

    Python's ``round`` uses banker's rounding (``round(62.5) == 62``), which would
    make a 62.5 score land on 62 instead of 63.
    """
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(numerator: Any, denominator: Any) -> Decimal:
    """Return ``numerator / denominator * 100`` as an exact decimal.

    Raises:
        ZeroDivisionError: If the denominator is zero.
    """
    denominator_value = to_decimal(denominator)
    if denominator_value == 0:
        raise ZeroDivisionError("percentage denominator is zero")
    return to_decimal(numerator) * Decimal(100) / denominator_value
