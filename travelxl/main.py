"""
FastAPI application entry point.

Configures the application with routes, middleware, and settings.
"""
import os

import sentry_sdk
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration

from travelxl.api.routes import trips
from travelxl.config import get_settings
from travelxl.exceptions import TravelXLError
from travelxl.middleware.logging import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
)
from travelxl.middleware.security import SecurityHeadersMiddleware, get_cors_origins

APP_VERSION = "1.0.0"

settings = get_settings()

configure_logging(settings.log_level)

logger = structlog.get_logger(__name__)

# Error tracking is opt-in
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=os.getenv("ENVIRONMENT", "development"),
        release=APP_VERSION,
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.1")),
        integrations=[FastApiIntegration(transaction_style="endpoint")],
        send_default_pii=False,
    )


app = FastAPI(
    title="TravelXL API",
    description="""
## Travel Expense Workbook API

Exports a trip and its receipts to a formatted Excel workbook and imports
hand-edited workbooks back into trip metadata and receipts.

- **Export**: fixed layout with metadata block, receipt table and totals row
- **Import**: locates the receipt table by its header, tolerates messy rows
- **Summary**: totals overall and per category
    """,
    version=APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Trips", "description": "Trip workbook export, import and summary"},
        {"name": "Health", "description": "Health checks"},
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID", "Content-Disposition"],
)
app.add_middleware(SecurityHeadersMiddleware)

# Order matters: correlation ID first
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(trips.router, prefix="/api/v1", tags=["Trips"])


@app.exception_handler(TravelXLError)
async def travelxl_exception_handler(request: Request, exc: TravelXLError):
    """Handle all TravelXL custom exceptions."""
    logger.warning(
        "travelxl_error",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=str(request.url.path),
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with consistent format."""
    sentry_sdk.capture_exception(exc)

    logger.error(
        "unhandled_error",
        error_type=type(exc).__name__,
        message=str(exc),
        path=str(request.url.path),
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": True,
            "error_code": "TXL-999",
            "message": "An unexpected error occurred. Please try again.",
            "details": {"error_type": type(exc).__name__} if settings.debug else {},
        },
    )


@app.get("/health", tags=["Health"])
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy", "version": APP_VERSION}
