"""
Custom exceptions for TravelXL.

Provides a hierarchy of exceptions with error codes for consistent error handling.
"""
from typing import Optional, Dict, Any, List


class TravelXLError(Exception):
    """
    Base exception for all TravelXL errors.

    Attributes:
        error_code: Unique error code (e.g., TXL-001)
        message: Human-readable error message
        details: Additional error context
    """
    error_code: str = "TXL-000"
    http_status: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# Upload Errors (TXL-1XX)
class InvalidFileTypeError(TravelXLError):
    """Invalid file type uploaded."""
    error_code = "TXL-102"
    http_status = 400

    def __init__(self, filename: str, expected_types: List[str], **kwargs):
        message = f"Invalid file type. Expected: {', '.join(expected_types)}"
        super().__init__(message, details={"filename": filename, "expected_types": expected_types}, **kwargs)


class FileTooLargeError(TravelXLError):
    """File exceeds maximum size limit."""
    error_code = "TXL-103"
    http_status = 413

    def __init__(self, size: int, max_size: int, **kwargs):
        message = f"File too large. Maximum size: {max_size // (1024*1024)}MB"
        super().__init__(message, details={"size": size, "max_size": max_size}, **kwargs)


# Spreadsheet Import Errors (TXL-2XX)
class SpreadsheetImportError(TravelXLError):
    """Structural failure while importing a spreadsheet."""
    error_code = "TXL-200"
    http_status = 422

    def __init__(self, message: str = "Import failed", **kwargs):
        super().__init__(message, **kwargs)


class ReceiptHeaderNotFoundError(SpreadsheetImportError):
    """No row in the sheet looks like the receipt table header."""
    error_code = "TXL-201"

    def __init__(self, scanned_rows: int, **kwargs):
        message = (
            "Receipt header row not found. Expected columns like: "
            "Date, Category, Currency, Exchange Rate, Cost in EUR."
        )
        super().__init__(message, details={"scanned_rows": scanned_rows}, **kwargs)


class RequiredColumnsMissingError(SpreadsheetImportError):
    """Header row found, but a required column could not be resolved."""
    error_code = "TXL-202"

    def __init__(self, missing: List[str], header_row: int, **kwargs):
        message = "Import failed: required columns not found (Category / Cost in EUR)."
        super().__init__(
            message,
            details={"missing": missing, "header_row": header_row},
            **kwargs,
        )


class WorkbookReadError(SpreadsheetImportError):
    """Uploaded bytes are not a readable workbook."""
    error_code = "TXL-203"

    def __init__(self, reason: str, **kwargs):
        message = "Import failed: file is not a readable .xlsx workbook."
        super().__init__(message, details={"reason": reason}, **kwargs)


# Validation Errors (TXL-7XX)
class ValidationError(TravelXLError):
    """Input validation failed."""
    error_code = "TXL-700"
    http_status = 400

    def __init__(self, message: str = "Validation failed", errors: list = None, **kwargs):
        details = kwargs.pop("details", {})
        details["errors"] = errors or []
        super().__init__(message, details=details, **kwargs)
