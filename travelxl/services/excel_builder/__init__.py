"""
Excel Builder module for TravelXL.

Provides tools for generating the formatted trip expense workbook.
"""

from travelxl.services.excel_builder.builder import TripWorkbookBuilder, build_trip_workbook
from travelxl.services.excel_builder.styles import BASIC_STYLE, StyleConfig

__all__ = [
    "TripWorkbookBuilder",
    "build_trip_workbook",
    "BASIC_STYLE",
    "StyleConfig",
]
