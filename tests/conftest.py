"""
Pytest configuration and fixtures.
"""
import io
import zipfile
from datetime import date
from typing import Any, Generator, List, Sequence

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from travelxl.config import get_settings
from travelxl.models import Receipt, Trip
import travelxl.services.excel_parser as excel_parser_module
import travelxl.services.import_export_service as service_module


def make_workbook(rows: Sequence[Sequence[Any]], title: str = "Sheet") -> bytes:
    """Write rows into the first sheet of a new workbook and return its bytes."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(list(row))

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def workbook_bytes():
    """Factory that turns rows into workbook bytes."""
    return make_workbook


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Drop cached settings and service singletons around each test."""
    get_settings.cache_clear()
    service_module._service_instance = None
    excel_parser_module._parser_instance = None
    yield
    get_settings.cache_clear()
    service_module._service_instance = None
    excel_parser_module._parser_instance = None


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the API."""
    from travelxl.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_trip() -> Trip:
    """A December trip in ISO week 50."""
    return Trip(
        id="trip-1",
        arrival_date=date(2025, 12, 9),
        return_date=date(2025, 12, 12),
        traveler="Alex Doe",
        iso_week=50,
        title="Week 50",
    )


@pytest.fixture
def sample_receipts() -> List[Receipt]:
    """Three receipts with mixed currencies."""
    return [
        Receipt(
            trip_id="trip-1",
            date=date(2025, 12, 9),
            category="Hotel",
            currency="EUR",
            exchange_rate=1.0,
            cost_eur=240.0,
        ),
        Receipt(
            trip_id="trip-1",
            date=date(2025, 12, 10),
            category="Food and Drinks",
            currency="CHF",
            exchange_rate=1.07,
            cost_eur=32.5,
            file_key="receipts/trip-1/lunch.jpg",
            file_name="lunch.jpg",
            mime_type="image/jpeg",
        ),
        Receipt(
            trip_id="trip-1",
            date=date(2025, 12, 11),
            category="Fuel",
            currency="EUR",
            exchange_rate=1.0,
            cost_eur=61.2,
        ),
    ]


@pytest.fixture
def hand_edited_rows() -> List[List[Any]]:
    """A messy sheet: metadata in odd rows, header further down, noise rows."""
    return [
        ["Expense report", None, None],
        ["Arrival date", "09.12.2025", None],
        ["Return date", "2025-12-12 00:00:00", None],
        ["Traveler", "Sam Roe", None],
        [None, None, None],
        ["notes", "paid by card", None],
        ["#", "Date", "Category", "Curr", "Rate", "Cost (EUR)"],
        [1, "2025-12-09", "Hotel", "EUR", 1, "120,50"],
        [2, "10.12.2025", "Fuel", None, None, 45],
        [3, None, "", "EUR", 1, 10],
        [4, None, "Car", "EUR", 1, 0],
        [None, None, "Total", None, None, 165.5],
    ]


@pytest.fixture
def damaged_workbook(workbook_bytes) -> bytes:
    """A valid zip whose workbook part is not well-formed XML."""
    source = zipfile.ZipFile(io.BytesIO(workbook_bytes([["Date", "Category", "Cost in EUR"]])))
    buffer = io.BytesIO()
    with source, zipfile.ZipFile(buffer, "w") as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename == "xl/workbook.xml":
                data = b"<not xml"
            target.writestr(item, data)
    return buffer.getvalue()
