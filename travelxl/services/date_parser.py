"""
Date parsing and ISO week numbering for TravelXL.

Hand-edited spreadsheets carry dates in many shapes: typed date cells,
"2025-12-09 00:00:00" strings, "09.12.2025", raw serial numbers. All of them
are normalized to ``datetime.date``; anything unrecognizable becomes None.
"""
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, Optional

import structlog
from openpyxl.utils.datetime import from_excel

logger = structlog.get_logger(__name__)


ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
DOTTED_DATE_PATTERN = re.compile(r"^(\d{2})\.(\d{2})\.(\d{4})$")

# Tried in order once the strict shapes above have failed
FALLBACK_FORMATS = [
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
]


def _iso_to_date(text: str) -> Optional[date]:
    match = ISO_DATE_PATTERN.match(text)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _dotted_to_date(text: str) -> Optional[date]:
    match = DOTTED_DATE_PATTERN.match(text)
    if not match:
        return None
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _serial_to_date(serial: float) -> Optional[date]:
    # Serials below 1 are times of day, not dates
    if not math.isfinite(serial) or serial < 1:
        return None
    try:
        return from_excel(serial).date()
    except (ValueError, OverflowError, TypeError):
        return None


def _fallback_to_date(text: str) -> Optional[date]:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a cell value into a calendar date.

    Accepted shapes, in priority order:
    1. ``datetime``/``date`` objects (typed date cells)
    2. "YYYY-MM-DD hh:mm:ss" (only the part before the first space counts)
    3. "YYYY-MM-DD"
    4. "DD.MM.YYYY"
    5. Spreadsheet serial numbers (1900 date system)
    6. Common free-form strings ("2025/12/09", "9 December 2025", ...)

    Args:
        value: Raw cell value.

    Returns:
        The parsed date, or None when no rule matches.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)):
        return _serial_to_date(float(value))

    text = str(value).strip()
    if not text:
        return None

    if " " in text:
        parsed = _iso_to_date(text.split(" ", 1)[0])
        if parsed:
            return parsed

    parsed = _iso_to_date(text) or _dotted_to_date(text) or _fallback_to_date(text)
    if parsed is None:
        logger.debug("Unrecognized date value", value=text)
    return parsed


def parse_date_iso(value: Any) -> Optional[str]:
    """Parse a cell value and return it as "YYYY-MM-DD" text (or None)."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def iso_week_of(value: Any) -> int:
    """
    Compute the ISO-8601 week number of a date.

    The date is moved to the Thursday of its (Monday-start) week; the week
    number is then the count of 7-day blocks from January 1st of that
    Thursday's year.

    Args:
        value: A date, or anything ``parse_date`` understands.

    Returns:
        Week number 1..53, or 0 when the value is not a date.
    """
    day = parse_date(value)
    if day is None:
        return 0

    thursday = day + timedelta(days=4 - day.isoweekday())
    year_start = date(thursday.year, 1, 1)
    return math.ceil(((thursday - year_start).days + 1) / 7)
