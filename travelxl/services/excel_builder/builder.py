"""
TripWorkbookBuilder for generating the trip expense workbook.

Writes one trip and its receipts into a fixed single-sheet layout:
metadata block, receipt table, totals row, column formatting.
"""

import io
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

import structlog
from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from travelxl.config import get_settings
from travelxl.models import DEFAULT_CURRENCY, Receipt, Trip
from travelxl.services.date_parser import parse_date
from travelxl.services.numeric_parser import finite_or_zero, parse_decimal
from travelxl.services.excel_builder.styles import (
    BASIC_STYLE,
    COLUMN_WIDTHS,
    COST_FORMAT,
    DATE_FORMAT,
    RATE_FORMAT,
    StyleConfig,
)

logger = structlog.get_logger(__name__)


# Creation timestamp is pinned; openpyxl stamps "modified" itself on save
FIXED_TIMESTAMP = datetime(2000, 1, 1)


class TripWorkbookBuilder:
    """
    Generates the expense workbook for a single trip.

    Layout:
    1. Rows 1-4: Trip Title, Arrival Date, Return Date, Traveler
    2. Row 6: receipt table header
    3. Row 7 onwards: one row per receipt
    4. Totals row right below the last receipt
    """

    TITLE_ROW = 1
    ARRIVAL_ROW = 2
    RETURN_ROW = 3
    TRAVELER_ROW = 4

    TABLE_HEADER_ROW = 6
    DATA_START_ROW = 7

    COLUMNS = ["No", "Date", "Category", "Currency", "Exchange Rate", "Cost in EUR"]

    # 1-based column positions
    NO_COLUMN = 1
    DATE_COLUMN = 2
    CATEGORY_COLUMN = 3
    CURRENCY_COLUMN = 4
    RATE_COLUMN = 5
    COST_COLUMN = 6

    TOTAL_LABEL = "Total"

    def __init__(
        self,
        sheet_title: Optional[str] = None,
        style: StyleConfig = BASIC_STYLE,
    ):
        """
        Initialize TripWorkbookBuilder.

        Args:
            sheet_title: Worksheet name (defaults to the configured title).
            style: Fonts, borders and alignment for the sheet.
        """
        self.sheet_title = sheet_title or get_settings().sheet_title
        self.style = style

        # State
        self.workbook: Optional[Workbook] = None
        self.worksheet: Optional[Worksheet] = None
        self.total_row: Optional[int] = None

    def build(self, trip: Trip, receipts: Sequence[Receipt]) -> Workbook:
        """
        Build the workbook.

        Args:
            trip: Trip whose metadata goes into the header block.
            receipts: Receipts in display order.

        Returns:
            OpenPyXL Workbook object.
        """
        self.workbook = Workbook()
        self.worksheet = self.workbook.active
        self.worksheet.title = self.sheet_title

        self.workbook.properties.creator = "TravelXL"
        self.workbook.properties.created = FIXED_TIMESTAMP

        self._write_metadata(trip)
        self._write_table_header()
        self._write_receipts(receipts)
        self.total_row = self._write_total(receipts)
        self._set_column_widths()

        if receipts:
            last_data_row = self.DATA_START_ROW + len(receipts) - 1
            self.worksheet.auto_filter.ref = f"A{self.TABLE_HEADER_ROW}:F{last_data_row}"

        logger.info(
            "Trip workbook built",
            iso_week=trip.iso_week,
            receipts=len(receipts),
            total_row=self.total_row,
        )

        return self.workbook

    def _write_metadata(self, trip: Trip) -> None:
        """Write the label/value block at the top of the sheet."""
        ws = self.worksheet
        entries = [
            (self.TITLE_ROW, "Trip Title", str(trip.title or "")),
            (self.ARRIVAL_ROW, "Arrival Date", trip.arrival_date),
            (self.RETURN_ROW, "Return Date", trip.return_date),
            (self.TRAVELER_ROW, "Traveler", str(trip.traveler or "")),
        ]

        for row, label, value in entries:
            label_cell = ws.cell(row=row, column=1, value=label)
            label_cell.font = self.style.label_font
            label_cell.alignment = self.style.label_alignment

            if row in (self.ARRIVAL_ROW, self.RETURN_ROW):
                value, number_format = _date_cell(value)
                value_cell = ws.cell(row=row, column=2, value=value)
                if number_format:
                    value_cell.number_format = number_format
            else:
                ws.cell(row=row, column=2, value=value)

    def _write_table_header(self) -> None:
        ws = self.worksheet
        for col, label in enumerate(self.COLUMNS, 1):
            cell = ws.cell(row=self.TABLE_HEADER_ROW, column=col, value=label)
            cell.font = self.style.header_font
            if self.style.header_border:
                cell.border = self.style.header_border

    def _write_receipts(self, receipts: Sequence[Receipt]) -> None:
        """Write one row per receipt, substituting defaults for missing values."""
        ws = self.worksheet

        for idx, receipt in enumerate(receipts):
            row = self.DATA_START_ROW + idx

            ws.cell(row=row, column=self.NO_COLUMN, value=idx + 1)

            value, number_format = _date_cell(receipt.date)
            date_cell = ws.cell(row=row, column=self.DATE_COLUMN, value=value)
            if number_format:
                date_cell.number_format = number_format

            ws.cell(row=row, column=self.CATEGORY_COLUMN, value=str(receipt.category or ""))
            ws.cell(
                row=row,
                column=self.CURRENCY_COLUMN,
                value=str(receipt.currency or DEFAULT_CURRENCY),
            )

            rate_cell = ws.cell(
                row=row,
                column=self.RATE_COLUMN,
                value=parse_decimal(receipt.exchange_rate, 1.0),
            )
            rate_cell.number_format = RATE_FORMAT
            rate_cell.alignment = self.style.value_alignment

            cost_cell = ws.cell(
                row=row,
                column=self.COST_COLUMN,
                value=parse_decimal(receipt.cost_eur, 0.0),
            )
            cost_cell.number_format = COST_FORMAT
            cost_cell.alignment = self.style.value_alignment

    def _write_total(self, receipts: Sequence[Receipt]) -> int:
        """Write the totals row and return its row number."""
        ws = self.worksheet
        row = self.DATA_START_ROW + len(receipts)
        total = sum((finite_or_zero(receipt.cost_eur) for receipt in receipts), 0.0)

        label_cell = ws.cell(row=row, column=self.RATE_COLUMN, value=self.TOTAL_LABEL)
        total_cell = ws.cell(row=row, column=self.COST_COLUMN, value=total)
        total_cell.number_format = COST_FORMAT
        total_cell.alignment = self.style.value_alignment

        for cell in (label_cell, total_cell):
            cell.font = self.style.total_font
            if self.style.total_border:
                cell.border = self.style.total_border

        return row

    def _set_column_widths(self) -> None:
        for letter, width in COLUMN_WIDTHS.items():
            self.worksheet.column_dimensions[letter].width = width

    def to_bytes(self) -> bytes:
        """
        Serialize the built workbook.

        Returns:
            The .xlsx file content.
        """
        if not self.workbook:
            raise ValueError("No workbook to serialize. Call build() first.")

        buffer = io.BytesIO()
        self.workbook.save(buffer)
        return buffer.getvalue()

    @staticmethod
    def filename_for(trip: Trip) -> str:
        """Suggested download name, e.g. "Week50.xlsx"."""
        return f"Week{trip.iso_week or 0}.xlsx"


def _date_cell(value: Any) -> Tuple[Any, Optional[str]]:
    """
    Resolve a date value into (cell value, number format).

    Parseable dates become date-typed cells; anything else is kept as text.
    """
    if value is None or value == "":
        return "", None

    parsed = parse_date(value)
    if parsed:
        return parsed, DATE_FORMAT
    return str(value), None


def build_trip_workbook(trip: Trip, receipts: List[Receipt]) -> Tuple[bytes, str]:
    """Build the workbook for a trip and return (content, filename)."""
    builder = TripWorkbookBuilder()
    builder.build(trip, receipts)
    return builder.to_bytes(), TripWorkbookBuilder.filename_for(trip)
