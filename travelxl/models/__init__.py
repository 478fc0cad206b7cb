"""Models package."""
from travelxl.models.receipt import CATEGORIES, DEFAULT_CATEGORY, DEFAULT_CURRENCY, Receipt
from travelxl.models.trip import Trip, TripPatch, default_title

__all__ = [
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "DEFAULT_CURRENCY",
    "Receipt",
    "Trip",
    "TripPatch",
    "default_title",
]
