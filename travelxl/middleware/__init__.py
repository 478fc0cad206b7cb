"""
Middleware module initialization.
"""
from travelxl.middleware.logging import (
    CorrelationIdMiddleware,
    RequestLoggingMiddleware,
    add_correlation_id_processor,
    configure_logging,
    get_correlation_id,
    log_performance,
    redact_sensitive_data,
    redact_sensitive_processor,
)
from travelxl.middleware.security import SecurityHeadersMiddleware, get_cors_origins

__all__ = [
    "CorrelationIdMiddleware",
    "RequestLoggingMiddleware",
    "add_correlation_id_processor",
    "configure_logging",
    "get_correlation_id",
    "log_performance",
    "redact_sensitive_data",
    "redact_sensitive_processor",
    "SecurityHeadersMiddleware",
    "get_cors_origins",
]
