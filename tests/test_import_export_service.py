"""
Tests for the import/export service.
"""
import io
from datetime import date

import pytest
from openpyxl import Workbook

from travelxl.services.import_export_service import (
    ImportExportService,
    get_import_export_service,
)


class TestExportImportRoundTrip:
    """Exported workbooks import back into the same trip and receipts."""

    @pytest.fixture
    def service(self) -> ImportExportService:
        return ImportExportService()

    def test_export_returns_filename(self, service, sample_trip, sample_receipts):
        """Export yields bytes and a week-based filename."""
        content, filename = service.export_trip(sample_trip, sample_receipts)

        assert filename == "Week50.xlsx"
        assert content[:2] == b"PK"

    def test_round_trip(self, service, sample_trip, sample_receipts):
        """Receipts and metadata survive export and import."""
        content, _ = service.export_trip(sample_trip, sample_receipts)
        result = service.import_trip(content)

        assert result.success
        assert result.imported == 3
        # Totals row
        assert result.skipped == 1
        assert result.warnings == []

        for original, imported in zip(sample_receipts, result.receipts):
            assert imported.date == original.date
            assert imported.category == original.category
            assert imported.currency == original.currency
            assert imported.exchange_rate == pytest.approx(original.exchange_rate)
            assert imported.cost_eur == pytest.approx(original.cost_eur)

        assert result.trip.arrival_date == date(2025, 12, 9)
        assert result.trip.return_date == date(2025, 12, 12)
        assert result.trip.traveler == "Alex Doe"
        assert result.trip.title == "Week 50"
        assert result.trip.iso_week == 50

    def test_round_trip_applies_to_trip(self, service, sample_trip, sample_receipts):
        """The imported patch applied to the prior trip reproduces it."""
        content, _ = service.export_trip(sample_trip, sample_receipts)
        result = service.import_trip(content, prior=sample_trip)

        assert sample_trip.apply(result.trip) == sample_trip


class TestImportFailures:
    """Structural problems fail the whole import."""

    @pytest.fixture
    def service(self) -> ImportExportService:
        return ImportExportService()

    def test_unreadable_bytes(self, service):
        """Non-workbook content fails with a read error."""
        result = service.import_trip(b"not a workbook", filename="broken.xlsx")

        assert not result.success
        assert result.error_code == "TXL-203"
        assert result.receipts == []
        assert result.trip is None

    def test_damaged_workbook(self, service, damaged_workbook):
        """Damaged workbook XML fails the import cleanly."""
        result = service.import_trip(damaged_workbook)

        assert not result.success
        assert result.error_code == "TXL-203"
        assert result.receipts == []

    def test_no_header(self, service, workbook_bytes):
        """Sheets without a receipt table fail and yield no data."""
        content = workbook_bytes([["Traveler", "Sam"], ["just", "notes"]])
        result = service.import_trip(content)

        assert not result.success
        assert result.error_code == "TXL-201"
        assert result.trip is None

    def test_empty_table_warns(self, service, workbook_bytes):
        """A header with no receipts succeeds with a warning."""
        content = workbook_bytes([["Date", "Category", "Cost in EUR"]])
        result = service.import_trip(content)

        assert result.success
        assert result.imported == 0
        assert len(result.warnings) == 1

    def test_first_sheet_only(self, service):
        """Only the first sheet is read."""
        wb = Workbook()
        wb.active.append(["nothing", "here"])
        other = wb.create_sheet("Receipts")
        other.append(["Date", "Category", "Cost in EUR"])
        other.append(["2025-01-01", "Car", 10])
        wb.active = 1

        buffer = io.BytesIO()
        wb.save(buffer)
        result = service.import_trip(buffer.getvalue())

        assert not result.success
        assert result.error_code == "TXL-201"


class TestServiceSingleton:
    """Tests for the service accessor."""

    def test_singleton(self):
        assert get_import_export_service() is get_import_export_service()

    def test_summarize(self, sample_receipts):
        """Summary delegates to the aggregator."""
        summary = get_import_export_service().summarize(sample_receipts)
        assert summary.total_eur == pytest.approx(333.7)
