"""
Tests for the Excel upload parser.
"""
import io
from datetime import datetime

import pytest
from openpyxl import Workbook

from travelxl.exceptions import WorkbookReadError
from travelxl.services.excel_parser import ExcelParser, get_excel_parser


class TestExcelParser:
    """Tests for ExcelParser."""

    @pytest.fixture
    def parser(self) -> ExcelParser:
        """Create parser instance."""
        return ExcelParser()

    def test_parse_values(self, parser: ExcelParser, workbook_bytes):
        """Cells come back typed."""
        content = workbook_bytes([["Date", 12.5], [datetime(2025, 12, 9), "x"]], title="Trip")
        sheet = parser.parse(content, filename="trip.xlsx")

        assert sheet.name == "Trip"
        assert sheet.max_row == 2
        assert sheet.max_column == 2
        assert sheet.rows == [("Date", 12.5), (datetime(2025, 12, 9), "x")]

    def test_formula_cached_values(self, parser: ExcelParser):
        """Formulas without a cached result read as None."""
        wb = Workbook()
        wb.active.append([1, 2, "=A1+B1"])
        buffer = io.BytesIO()
        wb.save(buffer)

        assert parser.read_first_sheet(buffer.getvalue()) == [(1, 2, None)]

    def test_unreadable_content(self, parser: ExcelParser):
        """Non-workbook bytes raise a read error."""
        with pytest.raises(WorkbookReadError) as exc_info:
            parser.parse(b"%PDF-1.4 not a workbook")

        assert exc_info.value.error_code == "TXL-203"

    def test_damaged_xml_part(self, parser: ExcelParser, damaged_workbook: bytes):
        """A zip with malformed workbook XML raises a read error."""
        with pytest.raises(WorkbookReadError) as exc_info:
            parser.parse(damaged_workbook)

        assert exc_info.value.error_code == "TXL-203"

    def test_empty_content(self, parser: ExcelParser):
        with pytest.raises(WorkbookReadError):
            parser.read_first_sheet(b"")

    def test_singleton(self):
        assert get_excel_parser() is get_excel_parser()
