"""
Market Quotes - Custom Exceptions
Application-specific exceptions raised past the aggregator boundary.
"""
from typing import Optional, Any, Dict


class MarketQuotesException(Exception):
    """Base exception for the quote aggregation layer."""

    def __init__(
        self,
        message: str = "An error occurred",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# =========================
# Caller Errors
# =========================

class ValidationError(MarketQuotesException):
    """Invalid request arguments (e.g. empty symbol)."""

    def __init__(self, message: str = "Invalid request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="VALIDATION_ERROR", details=details)


class ConfigurationError(MarketQuotesException):
    """Invalid configuration (e.g. unknown provider name)."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)


# =========================
# Market Data Exceptions
# =========================

class MarketDataError(MarketQuotesException):
    """Market data related errors."""
    pass
