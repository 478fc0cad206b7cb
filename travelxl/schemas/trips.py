"""
Pydantic schemas for trip API endpoints.

Request models are lenient (dates and amounts may arrive as text) and are
converted to domain records before reaching the services.
"""
import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from travelxl.models import DEFAULT_CURRENCY, Receipt, Trip, TripPatch
from travelxl.services.date_parser import iso_week_of, parse_date
from travelxl.services.numeric_parser import parse_decimal
from travelxl.services.trip_summary import TripSummary

Amount = Union[float, str]


class TripIn(BaseModel):
    """Request model for a trip."""

    id: Optional[str] = Field(None, description="Trip identifier")
    arrival_date: Optional[str] = Field(None, description="Arrival date, e.g. 2025-12-09")
    return_date: Optional[str] = Field(None, description="Return date, e.g. 2025-12-12")
    traveler: Optional[str] = Field(None, description="Traveler name")
    iso_week: Optional[int] = Field(None, description="Ignored when the dates parse; recomputed")
    title: Optional[str] = Field(None, description="Trip title")

    def to_domain(self) -> Trip:
        """Convert to a Trip, keeping unparseable dates as text."""
        arrival = parse_date(self.arrival_date)
        ret = parse_date(self.return_date)
        week = iso_week_of(arrival or ret) or (self.iso_week or 0)

        return Trip(
            id=self.id,
            arrival_date=arrival or (self.arrival_date or ""),
            return_date=ret or (self.return_date or ""),
            traveler=self.traveler or "",
            iso_week=week,
            title=self.title,
        )


class ReceiptIn(BaseModel):
    """Request model for a receipt."""

    trip_id: Optional[str] = None
    date: Optional[str] = Field(None, description="Expense date")
    category: str = Field("", description="Expense category")
    currency: Optional[str] = Field(None, description="Currency code, EUR when empty")
    exchange_rate: Optional[Amount] = Field(None, description="Exchange rate, 1 when empty")
    cost_eur: Optional[Amount] = Field(None, description="Cost in EUR, 0 when empty")
    file_key: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None

    def to_domain(self) -> Receipt:
        """Convert to a Receipt, substituting defaults for malformed values."""
        return Receipt(
            trip_id=self.trip_id,
            date=parse_date(self.date) or (self.date or None),
            category=self.category,
            currency=self.currency or DEFAULT_CURRENCY,
            exchange_rate=parse_decimal(self.exchange_rate, 1.0),
            cost_eur=parse_decimal(self.cost_eur, 0.0),
            file_key=self.file_key,
            file_name=self.file_name,
            mime_type=self.mime_type,
        )


class ExportRequest(BaseModel):
    """Request model for workbook export."""

    trip: TripIn
    receipts: List[ReceiptIn] = Field(default_factory=list)


class SummaryRequest(BaseModel):
    """Request model for receipt totals."""

    receipts: List[ReceiptIn] = Field(default_factory=list)


class ReceiptOut(BaseModel):
    """Response model for an imported receipt."""

    trip_id: Optional[str] = None
    date: Optional[datetime.date] = None
    category: str
    currency: str
    exchange_rate: float
    cost_eur: float

    @classmethod
    def from_domain(cls, receipt: Receipt) -> "ReceiptOut":
        return cls(
            trip_id=receipt.trip_id,
            date=receipt.date,
            category=receipt.category,
            currency=receipt.currency,
            exchange_rate=receipt.exchange_rate,
            cost_eur=receipt.cost_eur,
        )


class TripPatchOut(BaseModel):
    """Response model for imported trip metadata."""

    arrival_date: Optional[datetime.date] = None
    return_date: Optional[datetime.date] = None
    traveler: Optional[str] = None
    title: Optional[str] = None
    iso_week: int = Field(0, description="ISO week of the arrival (or return) date")

    @classmethod
    def from_domain(cls, patch: TripPatch) -> "TripPatchOut":
        return cls(
            arrival_date=parse_date(patch.arrival_date),
            return_date=parse_date(patch.return_date),
            traveler=patch.traveler,
            title=patch.title,
            iso_week=patch.iso_week,
        )


class ImportResponse(BaseModel):
    """Response model for workbook import."""

    success: bool
    trip: Optional[TripPatchOut] = None
    receipts: List[ReceiptOut] = Field(default_factory=list)
    imported: int = Field(0, description="Number of receipts imported")
    skipped: int = Field(0, description="Non-empty rows that were not receipts")
    warnings: List[str] = Field(default_factory=list)


class CategoryTotal(BaseModel):
    """Total for one expense category."""

    category: str
    total_eur: float


class SummaryResponse(BaseModel):
    """Response model for receipt totals."""

    receipt_count: int
    total_eur: float
    category_totals: List[CategoryTotal]
    attachments: int

    @classmethod
    def from_domain(cls, summary: TripSummary) -> "SummaryResponse":
        return cls(
            receipt_count=summary.receipt_count,
            total_eur=summary.total_eur,
            category_totals=[
                CategoryTotal(category=category, total_eur=total)
                for category, total in summary.category_totals
            ],
            attachments=summary.attachments,
        )
