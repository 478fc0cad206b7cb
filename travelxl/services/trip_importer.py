"""
Trip importer for hand-edited expense spreadsheets.

Locates the trip metadata block and the receipt table by scanning cell text,
then emits a partial trip and normalized receipts. Label and header matching
is driven by small rule tables evaluated in a fixed order.
"""
import re
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import structlog

from travelxl.config import get_settings
from travelxl.exceptions import ReceiptHeaderNotFoundError, RequiredColumnsMissingError
from travelxl.models import DEFAULT_CURRENCY, Receipt, Trip, TripPatch, default_title
from travelxl.services.date_parser import parse_date
from travelxl.services.numeric_parser import parse_cost, parse_rate

logger = structlog.get_logger(__name__)


Row = Sequence[Any]
Predicate = Callable[[str], bool]

WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_label(value: Any) -> str:
    """Lower-case a cell's text and collapse whitespace."""
    text = "" if value is None else str(value)
    return WHITESPACE_PATTERN.sub(" ", text.lower()).strip()


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _is_blank(value: Any) -> bool:
    return _text(value) == ""


def _cell(row: Row, index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


@dataclass(frozen=True)
class LabelRule:
    """Maps a metadata label predicate to a TripPatch field."""

    field: str
    matches: Predicate
    parse: Callable[[Any], Any]


@dataclass(frozen=True)
class ColumnRule:
    """Maps a header predicate to a receipt column."""

    column: str
    matches: Predicate


def _is_date_header(h: str) -> bool:
    return "date" in h


def _is_category_header(h: str) -> bool:
    return "category" in h


def _is_cost_header(h: str) -> bool:
    return "cost" in h and "eur" in h


# Every matching rule applies; a later row overwrites an earlier match
METADATA_RULES: List[LabelRule] = [
    LabelRule("arrival_date", lambda label: "arrival" in label, parse_date),
    LabelRule("return_date", lambda label: "return" in label, parse_date),
    LabelRule("traveler", lambda label: "traveler" in label, _text),
    LabelRule(
        "title",
        lambda label: label == "trip title" or ("trip" in label and "title" in label),
        _text,
    ),
]

# A header row needs at least one cell matching each of these
HEADER_RULES: List[ColumnRule] = [
    ColumnRule("date", _is_date_header),
    ColumnRule("category", _is_category_header),
    ColumnRule("cost", _is_cost_header),
]

# First matching header cell wins for each column
COLUMN_RULES: List[ColumnRule] = [
    ColumnRule("date", _is_date_header),
    ColumnRule("category", _is_category_header),
    ColumnRule("currency", lambda h: "currency" in h or h == "curr"),
    ColumnRule("rate", lambda h: "exchange" in h or "rate" in h),
    ColumnRule("cost", _is_cost_header),
]

REQUIRED_COLUMNS = ("category", "cost")


@dataclass
class TripImport:
    """Result of reading a trip spreadsheet."""

    trip: TripPatch
    receipts: List[Receipt] = field(default_factory=list)
    header_row: int = 0  # 1-based sheet row of the receipt table header
    skipped: int = 0

    @property
    def imported(self) -> int:
        return len(self.receipts)


class TripImporter:
    """
    Reads trip metadata and receipts from spreadsheet rows.

    Import steps:
    1. Find the receipt table header (fails when absent)
    2. Resolve column positions (fails without Category / Cost in EUR)
    3. Read label/value metadata from the top rows
    4. Convert every following non-empty row into a receipt, skipping
       blank categories, "total" rows and zero costs
    """

    def __init__(
        self,
        metadata_scan_rows: Optional[int] = None,
        header_scan_rows: Optional[int] = None,
        fallback_traveler: Optional[str] = None,
    ):
        """
        Initialize importer.

        Args:
            metadata_scan_rows: Rows searched for metadata labels.
            header_scan_rows: Rows searched for the receipt table header.
            fallback_traveler: Traveler used when neither sheet nor prior trip has one.
        """
        settings = get_settings()
        self.metadata_scan_rows = metadata_scan_rows or settings.metadata_scan_rows
        self.header_scan_rows = header_scan_rows or settings.header_scan_rows
        self.fallback_traveler = fallback_traveler or settings.default_traveler

    def import_rows(self, rows: Sequence[Row], prior: Optional[Trip] = None) -> TripImport:
        """
        Import a trip from sheet rows.

        Args:
            rows: Rows of the first sheet, as value tuples.
            prior: Current trip; fields missing from the sheet keep its values.

        Returns:
            TripImport with the resolved trip patch and receipts.

        Raises:
            ReceiptHeaderNotFoundError: No header row in the scanned range.
            RequiredColumnsMissingError: Category or cost column missing.
        """
        header_idx = self.find_header_row(rows)
        columns = self.resolve_columns(rows[header_idx], header_idx)

        found = self.extract_metadata(rows)
        trip = self.merge_metadata(found, prior)

        trip_id = prior.id if prior else None
        receipts, skipped = self.extract_receipts(rows[header_idx + 1:], columns, trip_id=trip_id)

        logger.info(
            "Trip spreadsheet imported",
            header_row=header_idx + 1,
            imported=len(receipts),
            skipped=skipped,
        )

        return TripImport(
            trip=trip,
            receipts=receipts,
            header_row=header_idx + 1,
            skipped=skipped,
        )

    def extract_metadata(self, rows: Sequence[Row]) -> TripPatch:
        """
        Read label/value pairs from columns A and B of the top rows.

        A missing title is derived from the ISO week of the dates found.
        """
        values: Dict[str, Any] = {}

        for row in rows[:self.metadata_scan_rows]:
            if not row or len(row) < 2:
                continue

            label = _text(row[0]).lower()
            if not label:
                continue

            for rule in METADATA_RULES:
                if rule.matches(label):
                    values[rule.field] = rule.parse(row[1])

        patch = TripPatch(
            arrival_date=values.get("arrival_date"),
            return_date=values.get("return_date"),
            traveler=values.get("traveler") or None,
            title=values.get("title") or None,
        )

        if not patch.title and (patch.arrival_date or patch.return_date):
            patch = replace(patch, title=default_title(patch.iso_week))

        return patch

    def merge_metadata(self, found: TripPatch, prior: Optional[Trip]) -> TripPatch:
        """Fill fields missing from the sheet with the prior trip's values."""
        traveler = found.traveler or (prior.traveler if prior else None) or self.fallback_traveler

        if prior is None:
            return replace(found, traveler=traveler)

        return TripPatch(
            arrival_date=found.arrival_date or prior.arrival_date,
            return_date=found.return_date or prior.return_date,
            traveler=traveler,
            title=found.title or prior.title,
        )

    def find_header_row(self, rows: Sequence[Row]) -> int:
        """Return the 0-based index of the first row that looks like the receipt header."""
        for idx, row in enumerate(rows[:self.header_scan_rows]):
            labels = [normalize_label(value) for value in (row or ())]
            if all(any(rule.matches(label) for label in labels) for rule in HEADER_RULES):
                logger.debug("Receipt header found", row=idx + 1)
                return idx

        raise ReceiptHeaderNotFoundError(scanned_rows=min(len(rows), self.header_scan_rows))

    def resolve_columns(self, header: Row, header_idx: int = 0) -> Dict[str, Optional[int]]:
        """Map each receipt column to its 0-based position in the header row."""
        labels = [normalize_label(value) for value in (header or ())]
        columns: Dict[str, Optional[int]] = {}

        for rule in COLUMN_RULES:
            columns[rule.column] = next(
                (idx for idx, label in enumerate(labels) if rule.matches(label)),
                None,
            )

        missing = [name for name in REQUIRED_COLUMNS if columns[name] is None]
        if missing:
            raise RequiredColumnsMissingError(missing=missing, header_row=header_idx + 1)

        return columns

    def extract_receipts(
        self,
        rows: Sequence[Row],
        columns: Dict[str, Optional[int]],
        trip_id: Optional[str] = None,
    ) -> Tuple[List[Receipt], int]:
        """
        Convert table rows into receipts.

        Args:
            rows: Rows following the header row.
            columns: Column positions from resolve_columns.
            trip_id: Owning trip assigned to every receipt.

        Returns:
            Tuple of (receipts, number of non-empty rows skipped).
        """
        receipts: List[Receipt] = []
        skipped = 0

        for row in rows:
            if not row or all(_is_blank(value) for value in row):
                continue

            receipt = self._row_to_receipt(row, columns, trip_id)
            if receipt is None:
                skipped += 1
                continue
            receipts.append(receipt)

        return receipts, skipped

    def _row_to_receipt(
        self,
        row: Row,
        columns: Dict[str, Optional[int]],
        trip_id: Optional[str] = None,
    ) -> Optional[Receipt]:
        category = _text(_cell(row, columns["category"]))
        if not category or "total" in category.lower():
            return None

        cost = parse_cost(_cell(row, columns["cost"]))
        if not cost:
            return None

        currency = DEFAULT_CURRENCY
        if columns["currency"] is not None:
            currency = _text(_cell(row, columns["currency"])) or DEFAULT_CURRENCY

        rate = parse_rate(_cell(row, columns["rate"])) if columns["rate"] is not None else 1.0

        return Receipt(
            trip_id=trip_id,
            date=parse_date(_cell(row, columns["date"])),
            category=category,
            currency=currency,
            exchange_rate=rate,
            cost_eur=cost,
        )


def get_trip_importer() -> TripImporter:
    """Create a TripImporter from current settings."""
    return TripImporter()
