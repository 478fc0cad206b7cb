"""
Excel parser service.

Loads uploaded workbook bytes and exposes the first sheet as rows of values.
"""
import io
import zipfile
from xml.etree.ElementTree import ParseError
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import structlog
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from travelxl.exceptions import WorkbookReadError

logger = structlog.get_logger(__name__)


Row = Tuple[Any, ...]


@dataclass
class ParsedSheet:
    """Represents the values of a parsed worksheet."""

    name: str
    max_row: int
    max_column: int
    rows: List[Row] = field(default_factory=list)


class ExcelParser:
    """
    Service for reading uploaded Excel files.

    Cells come back typed: numbers as int/float, typed dates as datetime,
    everything else as text. Formula cells yield their cached result.
    """

    def parse(self, content: bytes, filename: Optional[str] = None) -> ParsedSheet:
        """
        Parse the first worksheet of a workbook.

        Args:
            content: Raw .xlsx bytes.
            filename: Original filename, for logging only.

        Returns:
            ParsedSheet with every row of the first sheet.

        Raises:
            WorkbookReadError: If the bytes are not a readable workbook.
        """
        logger.info("Parsing Excel upload", filename=filename, size=len(content))

        try:
            wb = load_workbook(filename=io.BytesIO(content), data_only=True)
        except (
            zipfile.BadZipFile,
            InvalidFileException,
            ParseError,
            KeyError,
            ValueError,
            OSError,
        ) as e:
            logger.warning("Workbook could not be read", filename=filename, error=str(e))
            raise WorkbookReadError(str(e))

        try:
            if not wb.worksheets:
                raise WorkbookReadError("workbook has no sheets")

            ws = wb.worksheets[0]
            rows = [tuple(row) for row in ws.iter_rows(values_only=True)]

            result = ParsedSheet(
                name=ws.title,
                max_row=ws.max_row,
                max_column=ws.max_column,
                rows=rows,
            )
        finally:
            wb.close()

        logger.info(
            "Excel upload parsed",
            sheet=result.name,
            rows=result.max_row,
            columns=result.max_column,
        )

        return result

    def read_first_sheet(self, content: bytes) -> List[Row]:
        """Return the first sheet's rows as value tuples."""
        return self.parse(content).rows


# Singleton instance
_parser_instance: Optional[ExcelParser] = None


def get_excel_parser() -> ExcelParser:
    """Get singleton ExcelParser instance."""
    global _parser_instance
    if _parser_instance is None:
        _parser_instance = ExcelParser()
    return _parser_instance
