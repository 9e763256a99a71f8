"""
Exception hierarchy for the round-trip arbitrage scanner.

Provides specific exception types for different error categories to enable
better error handling and debugging. Quote-level errors are raised inside the
HTTP layer only; the quote client classifies them into ``QuoteFailure`` values
before they reach the evaluator.
"""

from typing import Optional, Dict, Any


class RoundTripArbitrageError(Exception):
    """Base exception for all round-trip arbitrage related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(RoundTripArbitrageError):
    """Raised when there are configuration-related issues."""

    pass


class ValidationError(RoundTripArbitrageError):
    """Raised when validation of data or configuration fails."""

    pass


class QuoteError(RoundTripArbitrageError):
    """Raised when a quote request to the aggregator fails."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class NetworkError(QuoteError):
    """Raised when the quote provider is unreachable or the request times out."""

    pass


class ProviderError(QuoteError):
    """Raised when the quote provider answers with an application-level error."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        status_text: Optional[str] = None,
        error_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, endpoint, status_code, details)
        self.status_text = status_text
        self.error_message = error_message
