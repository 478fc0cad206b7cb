"""
Receipt model.

One expense line attached to a trip, with its cost converted to EUR and an
optional file attachment held by the blob storage backend.
"""
from dataclasses import dataclass
import datetime
from typing import List, Optional, Union

# Display set offered by the editor; imports accept any text
CATEGORIES: List[str] = ["Food and Drinks", "Fuel", "Hotel", "Car"]

DEFAULT_CATEGORY = "Food and Drinks"
DEFAULT_CURRENCY = "EUR"


@dataclass(frozen=True)
class Receipt:
    """
    A single expense line item.

    Attributes:
        category: Expense category, normally one of CATEGORIES.
        cost_eur: Cost converted to EUR; negative values are refunds.
        date: Date of the expense, if known. Text that is not a
            recognizable date is kept as entered.
        currency: Currency the expense was paid in.
        exchange_rate: Rate used for the EUR conversion.
        trip_id: Owning trip.
        file_key: Storage key of the attached file.
        file_name: Original name of the attached file.
        mime_type: Content type of the attached file.
    """

    category: str
    cost_eur: float = 0.0
    date: Optional[Union[datetime.date, str]] = None
    currency: str = DEFAULT_CURRENCY
    exchange_rate: float = 1.0
    trip_id: Optional[str] = None
    file_key: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def has_attachment(self) -> bool:
        return bool(self.file_key)
