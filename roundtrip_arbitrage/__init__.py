"""
Round-Trip Arbitrage Scanner.

Checks whether swapping a token into another and back through a DEX
aggregator quote API returns more than the borrowed amount plus a margin,
and reports the dominant route of each leg.
"""

PROJECT_NAME = "roundtrip-arbitrage"

from roundtrip_arbitrage.version import __version__ as VERSION
from roundtrip_arbitrage.exceptions import (
    RoundTripArbitrageError,
    ConfigurationError,
    ValidationError,
    QuoteError,
    NetworkError,
    ProviderError,
)

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "RoundTripArbitrageError",
    "ConfigurationError",
    "ValidationError",
    "QuoteError",
    "NetworkError",
    "ProviderError",
]
