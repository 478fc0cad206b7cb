"""
Tests for the trip spreadsheet importer.
"""
from datetime import date, datetime

import pytest

from travelxl.exceptions import ReceiptHeaderNotFoundError, RequiredColumnsMissingError
from travelxl.models import Trip
from travelxl.services.trip_importer import TripImporter, normalize_label

HEADER = ["No", "Date", "Category", "Currency", "Exchange Rate", "Cost in EUR"]


class TestHeaderDetection:
    """Tests for locating the receipt table."""

    @pytest.fixture
    def importer(self) -> TripImporter:
        return TripImporter(fallback_traveler="Traveler")

    def test_exported_layout(self, importer):
        """Header in row 6 of the exported layout."""
        rows = [["Trip Title", "Week 50"]] + [[None]] * 4 + [HEADER]
        assert importer.find_header_row(rows) == 5

    def test_header_variants(self, importer):
        """Header text is matched loosely."""
        rows = [["  DATE ", "Expense\nCategory", "cost  in eur"]]
        assert importer.find_header_row(rows) == 0

    def test_header_not_found(self, importer):
        """Sheets without a header row fail."""
        rows = [["Date", "Category"], [1, 2]]
        with pytest.raises(ReceiptHeaderNotFoundError) as exc_info:
            importer.import_rows(rows)

        assert exc_info.value.error_code == "TXL-201"
        assert "Receipt header row not found" in exc_info.value.message

    def test_header_beyond_scan_range(self):
        """Only the first rows are searched."""
        importer = TripImporter(header_scan_rows=3)
        rows = [[None]] * 3 + [HEADER]
        with pytest.raises(ReceiptHeaderNotFoundError):
            importer.find_header_row(rows)

    def test_missing_category_column(self, importer):
        """A cost column alone is not enough."""
        header = ["Date", "Cost in EUR", "Category notes"]
        columns = importer.resolve_columns(header)
        assert columns["category"] == 2

        with pytest.raises(RequiredColumnsMissingError) as exc_info:
            importer.resolve_columns(["Date", "Cost in EUR"], header_idx=4)

        assert exc_info.value.details == {"missing": ["category"], "header_row": 5}

    def test_column_resolution(self, importer):
        """Optional columns are located by their header text."""
        columns = importer.resolve_columns(["#", "Date", "Category", "Curr", "Rate", "Cost (EUR)"])
        assert columns == {"date": 1, "category": 2, "currency": 3, "rate": 4, "cost": 5}

    def test_optional_columns_absent(self, importer):
        """Currency and rate columns may be missing."""
        columns = importer.resolve_columns(["Date", "Category", "Cost EUR"])
        assert columns["currency"] is None
        assert columns["rate"] is None


class TestReceiptExtraction:
    """Tests for converting table rows into receipts."""

    @pytest.fixture
    def result(self, hand_edited_rows):
        return TripImporter(fallback_traveler="Traveler").import_rows(hand_edited_rows)

    def test_header_row(self, result):
        """Header row is reported 1-based."""
        assert result.header_row == 7

    def test_imported_receipts(self, result):
        """Only real expense rows become receipts."""
        assert result.imported == 2
        hotel, fuel = result.receipts

        assert hotel.category == "Hotel"
        assert hotel.cost_eur == pytest.approx(120.5)
        assert hotel.date == date(2025, 12, 9)

        assert fuel.category == "Fuel"
        assert fuel.currency == "EUR"
        assert fuel.exchange_rate == 1.0
        assert fuel.date == date(2025, 12, 10)

    def test_skipped_rows(self, result):
        """Blank category, zero cost and total rows are skipped."""
        assert result.skipped == 3

    def test_negative_costs_kept(self):
        """Refunds are imported."""
        rows = [HEADER, [1, None, "Hotel", "EUR", 1, -20]]
        result = TripImporter().import_rows(rows)
        assert result.receipts[0].cost_eur == -20.0

    def test_typed_cells(self):
        """Typed date cells and numeric rates are read directly."""
        rows = [HEADER, [1, datetime(2025, 3, 1, 0, 0), "Car", "USD", 0.92, 50.0]]
        receipt = TripImporter().import_rows(rows).receipts[0]

        assert receipt.date == date(2025, 3, 1)
        assert receipt.currency == "USD"
        assert receipt.exchange_rate == pytest.approx(0.92)

    def test_short_rows(self):
        """Rows shorter than the header are tolerated."""
        rows = [HEADER, [1, "2025-03-01", "Car"]]
        result = TripImporter().import_rows(rows)
        assert result.imported == 0
        assert result.skipped == 1

    def test_unparseable_receipt_date(self):
        """Bad dates are dropped, the receipt is kept."""
        rows = [HEADER, [1, "last tuesday", "Car", "EUR", 1, 3]]
        receipt = TripImporter().import_rows(rows).receipts[0]
        assert receipt.date is None


class TestMetadata:
    """Tests for trip metadata extraction and merging."""

    def test_metadata_from_sheet(self, hand_edited_rows):
        """Labels in column A, values in column B."""
        trip = TripImporter().import_rows(hand_edited_rows).trip

        assert trip.arrival_date == date(2025, 12, 9)
        assert trip.return_date == date(2025, 12, 12)
        assert trip.traveler == "Sam Roe"
        assert trip.iso_week == 50

    def test_default_title_from_week(self, hand_edited_rows):
        """Missing title is derived from the ISO week."""
        trip = TripImporter().import_rows(hand_edited_rows).trip
        assert trip.title == "Week 50"

    def test_explicit_title(self):
        """A Trip Title label wins over the derived title."""
        rows = [["Trip Title", "Zurich fair"], ["Arrival Date", "2025-12-09"], HEADER]
        trip = TripImporter().import_rows(rows).trip
        assert trip.title == "Zurich fair"

    def test_prior_values_fill_gaps(self):
        """Fields missing from the sheet keep the prior trip's values."""
        prior = Trip(
            arrival_date=date(2025, 1, 6),
            return_date=date(2025, 1, 8),
            traveler="Kim",
            iso_week=2,
            title="Kickoff",
        )
        rows = [["Return Date", "10.01.2025"], HEADER]
        trip = TripImporter().import_rows(rows, prior=prior).trip

        assert trip.arrival_date == date(2025, 1, 6)
        assert trip.return_date == date(2025, 1, 10)
        assert trip.traveler == "Kim"
        assert trip.title == "Week 2"

    def test_receipts_linked_to_prior_trip(self):
        """Imported receipts belong to the prior trip."""
        prior = Trip(date(2025, 1, 6), date(2025, 1, 8), "Kim", iso_week=2, id="trip-9")
        rows = [HEADER, [1, "2025-01-06", "Hotel", "EUR", 1, 80], [2, None, "Fuel", "EUR", 1, 20]]
        receipts = TripImporter().import_rows(rows, prior=prior).receipts

        assert [receipt.trip_id for receipt in receipts] == ["trip-9", "trip-9"]

    def test_receipts_without_prior_trip(self):
        """Without a prior trip, receipts are unassigned."""
        rows = [HEADER, [1, None, "Hotel", "EUR", 1, 80]]
        assert TripImporter().import_rows(rows).receipts[0].trip_id is None

    def test_fallback_traveler(self):
        """Without any traveler the configured fallback is used."""
        trip = TripImporter(fallback_traveler="Someone").import_rows([HEADER]).trip
        assert trip.traveler == "Someone"
        assert trip.title is None

    def test_later_label_overwrites(self):
        """When a label repeats, the last one counts."""
        rows = [["Traveler", "A"], ["Traveler", "B"], HEADER]
        assert TripImporter().import_rows(rows).trip.traveler == "B"


class TestNormalizeLabel:
    """Tests for header text normalization."""

    def test_normalize(self):
        assert normalize_label("  Cost\tin   EUR ") == "cost in eur"
        assert normalize_label(None) == ""
        assert normalize_label(12) == "12"
