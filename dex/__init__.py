"""
DEX aggregator quoting, route extraction and round-trip evaluation.
"""

from .evaluator import ArbitrageEvaluator
from .quote_client import QuoteClient
from .routes import extract_route, select_dominant_split
from .types import (
    ArbitrageEvaluation,
    FailureKind,
    ProtocolSplit,
    QuoteFailure,
    QuoteRequest,
    QuoteSuccess,
    RouteStep,
    Token,
)

__all__ = [
    "ArbitrageEvaluator",
    "QuoteClient",
    "extract_route",
    "select_dominant_split",
    "ArbitrageEvaluation",
    "FailureKind",
    "ProtocolSplit",
    "QuoteFailure",
    "QuoteRequest",
    "QuoteSuccess",
    "RouteStep",
    "Token",
]
