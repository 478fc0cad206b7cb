"""
Styles for the trip expense sheet.

Defines fonts, borders, number formats and column widths used by
TripWorkbookBuilder.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from openpyxl.styles import (
    Alignment,
    Border,
    Font,
    Side,
)


@dataclass
class StyleConfig:
    """Configuration for the sheet style."""

    name: str

    # Fonts
    label_font: Font
    header_font: Font
    total_font: Font

    # Borders
    header_border: Optional[Border] = None
    total_border: Optional[Border] = None

    # Alignment
    label_alignment: Optional[Alignment] = None
    value_alignment: Optional[Alignment] = None


# =============================================================================
# STYLE DEFINITION
# =============================================================================

BASIC_STYLE = StyleConfig(
    name="Basic",
    label_font=Font(bold=True, size=11),
    header_font=Font(bold=True, size=11),
    total_font=Font(bold=True, size=11),
    header_border=Border(
        bottom=Side(style="thin", color="000000"),
    ),
    total_border=Border(
        top=Side(style="thin", color="000000"),
        bottom=Side(style="double", color="000000"),
    ),
    label_alignment=Alignment(horizontal="left", vertical="center"),
    value_alignment=Alignment(horizontal="right", vertical="center"),
)


# =============================================================================
# NUMBER FORMATS AND WIDTHS
# =============================================================================

DATE_FORMAT = "dd.mm.yyyy"
RATE_FORMAT = "0.000"
COST_FORMAT = "0.00"

# Character widths for No, Date, Category, Currency, Exchange Rate, Cost in EUR
COLUMN_WIDTHS: Dict[str, float] = {
    "A": 8,
    "B": 17,
    "C": 31,
    "D": 13.5,
    "E": 17,
    "F": 17,
}
