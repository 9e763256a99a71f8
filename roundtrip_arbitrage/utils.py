"""
Common utilities and helper functions for the round-trip arbitrage scanner.

This module provides centralized helper functions for common operations like
token unit conversion, duration formatting and logging.
"""

import logging
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Optional, Union

from .exceptions import ValidationError

# Enough digits for uint256 amounts with 77 decimals
UNIT_PRECISION = 80


# Token unit conversion
def parse_units(value: Union[str, int, Decimal], decimals: int) -> int:
    """
    Convert a human-readable token amount to its smallest-unit integer.

    The conversion is exact: a value with more fractional digits than the
    token supports is rejected instead of being rounded.

    Args:
        value: Amount in whole tokens (e.g., "10.5")
        decimals: Decimal precision of the token

    Returns:
        Amount in the token's smallest unit

    Raises:
        ValidationError: If the value is negative, not a number, or too precise

    Examples:
        >>> parse_units("10.5", 18)
        10500000000000000000
        >>> parse_units("1", 6)
        1000000
    """
    if decimals < 0:
        raise ValidationError(f"Invalid token decimals: {decimals}")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid token amount: {value!r}")

    if not amount.is_finite():
        raise ValidationError(f"Invalid token amount: {value!r}")
    if amount < 0:
        raise ValidationError(f"Token amount must be non-negative: {value}")

    with localcontext() as ctx:
        ctx.prec = UNIT_PRECISION
        scaled = amount.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValidationError(
                f"Amount {value} has more fractional digits than {decimals} decimals"
            )
        return int(scaled)


def format_units(amount: int, decimals: int) -> Decimal:
    """
    Convert a smallest-unit integer amount to whole tokens.

    Args:
        amount: Amount in the token's smallest unit
        decimals: Decimal precision of the token

    Returns:
        Exact Decimal amount in whole tokens
    """
    with localcontext() as ctx:
        ctx.prec = UNIT_PRECISION
        return Decimal(int(amount)).scaleb(-decimals)


def rescale_units(
    amount: int, from_decimals: int, to_decimals: int, round_up: bool = False
) -> int:
    """
    Re-express a smallest-unit amount in another decimal precision.

    Scaling down truncates unless ``round_up`` is set.
    """
    if to_decimals >= from_decimals:
        return amount * 10 ** (to_decimals - from_decimals)
    factor = 10 ** (from_decimals - to_decimals)
    if round_up:
        return -(-amount // factor)
    return amount // factor


# Timestamp utilities
def format_duration(seconds: float) -> str:
    """Format duration in seconds to human-readable string."""
    if seconds < 60:
        return f"{seconds:.2f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"


# Logging utilities
def get_logger(
    name: str,
    level: Union[str, int] = logging.INFO,
    extra: Optional[Dict[str, Any]] = None,
) -> logging.Logger:
    """
    Get a structured logger with consistent formatting and extra context.

    Args:
        name: Logger name (typically __name__)
        level: Logging level
        extra: Additional context fields to include in all log messages

    Returns:
        Configured logger with structured output
    """
    logger = logging.getLogger(name)

    # Set level if not already set
    if logger.level == logging.NOTSET:
        logger.setLevel(level)

    # Defer to logging_config.setup() when the root logger is configured
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()

        format_str = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

        if extra:
            extra_fields = " | ".join([f"{k}=%(extra_{k})s" for k in extra.keys()])
            format_str = format_str.replace(
                " | %(message)s", f" | {extra_fields} | %(message)s"
            )

        formatter = logging.Formatter(format_str, datefmt="%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if extra:
            logger = logging.LoggerAdapter(
                logger, {"extra_" + k: v for k, v in extra.items()}
            )

    return logger
