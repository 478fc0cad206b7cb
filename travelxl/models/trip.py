"""
Trip model.

A trip is a travel period (arrival to return) owning zero or more receipts.
Records are replaced, never mutated: updates produce a new Trip.
"""
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from travelxl.services.date_parser import iso_week_of


def default_title(iso_week: int) -> str:
    """Title used when a trip has none."""
    return f"Week {iso_week}"


@dataclass(frozen=True)
class TripPatch:
    """
    Partial trip extracted from an imported spreadsheet.

    Attributes:
        arrival_date: Arrival date, if found.
        return_date: Return date, if found.
        traveler: Traveler name, if found.
        title: Trip title, if found or derived from the dates.
    """

    arrival_date: Optional[date] = None
    return_date: Optional[date] = None
    traveler: Optional[str] = None
    title: Optional[str] = None

    @property
    def iso_week(self) -> int:
        """ISO week of the arrival date, falling back to the return date."""
        return iso_week_of(self.arrival_date or self.return_date)


@dataclass(frozen=True)
class Trip:
    """
    A travel period with metadata.

    Attributes:
        arrival_date: First day of the trip.
        return_date: Last day of the trip (not checked against arrival_date).
        traveler: Name of the traveler.
        iso_week: ISO-8601 week of arrival_date (or return_date).
        title: Optional title, "Week {iso_week}" when absent.
        id: Identifier assigned by the storage backend.
    """

    arrival_date: date
    return_date: date
    traveler: str
    iso_week: int = 0
    title: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def for_date(cls, day: date, traveler: str) -> "Trip":
        """Create a one-day trip titled after its ISO week."""
        week = iso_week_of(day)
        return cls(
            arrival_date=day,
            return_date=day,
            traveler=traveler,
            iso_week=week,
            title=default_title(week),
        )

    @property
    def display_title(self) -> str:
        return self.title or default_title(self.iso_week)

    def apply(self, patch: TripPatch) -> "Trip":
        """Return a copy with the patch's non-empty fields applied and the week recomputed."""
        arrival = patch.arrival_date or self.arrival_date
        ret = patch.return_date or self.return_date
        return replace(
            self,
            arrival_date=arrival,
            return_date=ret,
            traveler=patch.traveler or self.traveler,
            title=patch.title or self.title,
            iso_week=iso_week_of(arrival or ret),
        )
