"""
Numeric parser service for receipt amounts and exchange rates.

Spreadsheet cells arrive as floats, ints, or text typed by hand, with either
"." or "," as the decimal separator:
- Numbers: 12.5, 3
- Text: "12.50", "12,50", " 7 "

Every helper returns a plain value and falls back to a default instead of
raising.
"""
import math
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def parse_decimal(value: Any, default: float = 0.0) -> float:
    """
    Parse a cell value into a finite float.

    Args:
        value: Raw cell value (number, text or None).
        default: Returned when the value is blank, non-numeric or non-finite.

    Returns:
        Parsed float or the default.
    """
    if value is None or isinstance(value, bool):
        return default

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else default

    text = str(value).strip().replace(",", ".")
    # float() also accepts digit separators like "1_000"
    if not text or "_" in text:
        return default

    try:
        number = float(text)
    except ValueError:
        logger.debug("Failed to parse number", value=text)
        return default

    return number if math.isfinite(number) else default


def parse_cost(value: Any) -> float:
    """Parse a cost in EUR, defaulting to 0."""
    return parse_decimal(value, 0.0)


def parse_rate(value: Any) -> float:
    """Parse an exchange rate; unparseable or zero rates become 1."""
    return parse_decimal(value, 1.0) or 1.0


def finite_or_zero(value: Any) -> float:
    """Coerce a stored amount for summing; non-finite values count as 0."""
    return parse_decimal(value, 0.0)


def format_fixed(value: Any, digits: int) -> str:
    """Format a number with a fixed number of decimals (non-finite as 0)."""
    return f"{finite_or_zero(value):.{digits}f}"
