"""
Trip API routes.

Provides endpoints for exporting a trip to Excel, importing an Excel file
back into trip data, and summarizing receipts.
"""
from typing import Optional

import structlog
from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import Response
from pydantic import ValidationError as PydanticValidationError

from travelxl.config import get_settings
from travelxl.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    SpreadsheetImportError,
    ValidationError,
)
from travelxl.models import Trip
from travelxl.schemas.trips import (
    ExportRequest,
    ImportResponse,
    ReceiptOut,
    SummaryRequest,
    SummaryResponse,
    TripIn,
    TripPatchOut,
)
from travelxl.services.import_export_service import (
    XLSX_CONTENT_TYPE,
    get_import_export_service,
)

logger = structlog.get_logger(__name__)

router = APIRouter()


ALLOWED_CONTENT_TYPES = {
    XLSX_CONTENT_TYPE,
    "application/octet-stream",
}


def validate_xlsx_file(file: UploadFile) -> None:
    """
    Validate that uploaded file is an .xlsx workbook.

    Args:
        file: Uploaded file.

    Raises:
        InvalidFileTypeError: If the name or content type is not .xlsx.
    """
    filename = file.filename or ""

    if not filename.lower().endswith(".xlsx"):
        raise InvalidFileTypeError(filename, [".xlsx"])

    if file.content_type and file.content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidFileTypeError(filename, [".xlsx"])


def parse_prior_trip(raw: Optional[str]) -> Optional[Trip]:
    """Parse the optional JSON-encoded prior trip form field."""
    if not raw:
        return None
    try:
        return TripIn.model_validate_json(raw).to_domain()
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid trip field",
            errors=[err["msg"] for err in e.errors()],
        )


@router.post(
    "/trips/export",
    summary="Export trip to Excel",
    response_class=Response,
)
async def export_trip(request: ExportRequest) -> Response:
    """
    Export one trip and its receipts as a formatted .xlsx workbook.

    The file is named after the trip's ISO week, e.g. Week50.xlsx.
    """
    service = get_import_export_service()

    trip = request.trip.to_domain()
    receipts = [receipt.to_domain() for receipt in request.receipts]

    content, filename = service.export_trip(trip, receipts)

    return Response(
        content=content,
        media_type=XLSX_CONTENT_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


@router.post(
    "/trips/import",
    response_model=ImportResponse,
    summary="Import trip from Excel",
)
async def import_trip(
    file: UploadFile = File(..., description="Expense workbook (.xlsx)"),
    trip: Optional[str] = Form(None, description="Current trip as JSON"),
) -> ImportResponse:
    """
    Read trip metadata and receipts from an uploaded workbook.

    Fields missing from the sheet keep the values of the `trip` form field.
    Nothing is stored; the caller persists the returned trip and receipts.
    """
    settings = get_settings()

    validate_xlsx_file(file)
    prior = parse_prior_trip(trip)

    content = await file.read()
    if len(content) > settings.max_upload_size_bytes:
        raise FileTooLargeError(len(content), settings.max_upload_size_bytes)

    service = get_import_export_service()
    result = service.import_trip(content, prior=prior, filename=file.filename)

    if not result.success:
        raise SpreadsheetImportError(
            result.error,
            details=result.details,
            error_code=result.error_code,
        )

    logger.info(
        "Trip import completed",
        filename=file.filename,
        imported=result.imported,
        skipped=result.skipped,
    )

    return ImportResponse(
        success=True,
        trip=TripPatchOut.from_domain(result.trip),
        receipts=[ReceiptOut.from_domain(receipt) for receipt in result.receipts],
        imported=result.imported,
        skipped=result.skipped,
        warnings=result.warnings,
    )


@router.post(
    "/trips/summary",
    response_model=SummaryResponse,
    summary="Summarize receipts",
)
async def summarize_trip(request: SummaryRequest) -> SummaryResponse:
    """Total the receipts overall and per category."""
    service = get_import_export_service()
    summary = service.summarize([receipt.to_domain() for receipt in request.receipts])
    return SummaryResponse.from_domain(summary)
