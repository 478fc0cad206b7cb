"""
Trip Import/Export Service.

Entry point for exporting a trip to a workbook, importing a workbook back
into trip data, and summarizing receipts. Persistence of the results is left
to the caller.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from travelxl.exceptions import SpreadsheetImportError
from travelxl.middleware.logging import log_performance
from travelxl.models import Receipt, Trip, TripPatch
from travelxl.services.excel_builder import TripWorkbookBuilder
from travelxl.services.excel_parser import ExcelParser, get_excel_parser
from travelxl.services.trip_importer import TripImporter, get_trip_importer
from travelxl.services.trip_summary import TripSummary, summarize_receipts

logger = structlog.get_logger(__name__)


XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass
class ImportResult:
    """Result of import operation."""
    success: bool
    trip: Optional[TripPatch] = None
    receipts: List[Receipt] = field(default_factory=list)
    imported: int = 0
    skipped: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None
    details: Dict = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)


class ImportExportService:
    """
    Service for exporting and importing trip workbooks.
    """

    def __init__(
        self,
        parser: Optional[ExcelParser] = None,
        importer: Optional[TripImporter] = None,
    ):
        self.parser = parser or get_excel_parser()
        self.importer = importer or get_trip_importer()

    # ==================== Export Methods ====================

    @log_performance("trip_export")
    def export_trip(
        self,
        trip: Trip,
        receipts: Sequence[Receipt],
    ) -> Tuple[bytes, str]:
        """
        Export a trip and its receipts as an .xlsx workbook.

        Args:
            trip: Trip to export
            receipts: Receipts in display order

        Returns:
            Tuple of (file_content, filename)
        """
        builder = TripWorkbookBuilder()
        builder.build(trip, list(receipts))
        content = builder.to_bytes()
        filename = TripWorkbookBuilder.filename_for(trip)

        logger.info("Trip exported", filename=filename, receipts=len(receipts), size=len(content))
        return content, filename

    # ==================== Import Methods ====================

    @log_performance("trip_import")
    def import_trip(
        self,
        file_content: bytes,
        prior: Optional[Trip] = None,
        filename: Optional[str] = None,
    ) -> ImportResult:
        """
        Import trip metadata and receipts from a workbook.

        Structural problems (unreadable file, no header row, missing required
        columns) fail the whole import and produce no records.

        Args:
            file_content: Workbook bytes
            prior: Current trip, whose values fill fields missing from the sheet
            filename: Original filename, for logging

        Returns:
            ImportResult with the trip patch and receipts to persist
        """
        try:
            sheet = self.parser.parse(file_content, filename=filename)
            parsed = self.importer.import_rows(sheet.rows, prior=prior)
        except SpreadsheetImportError as e:
            logger.warning(
                "Trip import failed",
                filename=filename,
                error_code=e.error_code,
                error=e.message,
            )
            return ImportResult(
                success=False,
                error=e.message,
                error_code=e.error_code,
                details=e.details,
            )

        result = ImportResult(
            success=True,
            trip=parsed.trip,
            receipts=parsed.receipts,
            imported=parsed.imported,
            skipped=parsed.skipped,
        )

        if result.imported == 0:
            result.warnings.append(
                "Import finished, but 0 receipts were detected. Check the Excel header/format."
            )

        return result

    # ==================== Summary ====================

    def summarize(self, receipts: Sequence[Receipt]) -> TripSummary:
        """Totals per trip and per category."""
        return summarize_receipts(receipts)


# Singleton instance
_service_instance: Optional[ImportExportService] = None


def get_import_export_service() -> ImportExportService:
    """Get singleton ImportExportService instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = ImportExportService()
    return _service_instance
