"""
Shared fixtures: registry tokens, quote payload builder and a scripted provider.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest

from dex.types import FailureKind, QuoteFailure, QuoteResult, QuoteSuccess, Token

USDC_ADDR = "0x" + "11" * 20
WETH_ADDR = "0x" + "22" * 20
DAI_ADDR = "0x" + "33" * 20
NATIVE_ADDR = "0x" + "ee" * 20
WRAPPED_ADDR = "0x" + "44" * 20


def split(name: str, part: float, to_addr: str, from_addr: str = "") -> dict:
    return {
        "name": name,
        "part": part,
        "fromTokenAddress": from_addr,
        "toTokenAddress": to_addr,
    }


def quote_payload(
    from_token: Token,
    to_token: Token,
    from_amount: int,
    to_amount: int,
    protocols: Optional[list] = None,
) -> dict:
    """Build a quote response body the way the aggregator returns it."""
    if protocols is None:
        protocols = [[[split("QUICKSWAP", 100, to_token.address, from_token.address)]]]
    return {
        "fromToken": {
            "symbol": from_token.symbol,
            "decimals": from_token.decimals,
            "address": from_token.address,
        },
        "toToken": {
            "symbol": to_token.symbol,
            "decimals": to_token.decimals,
            "address": to_token.address,
        },
        "fromTokenAmount": str(from_amount),
        "toTokenAmount": str(to_amount),
        "protocols": protocols,
        "estimatedGas": 180000,
    }


def quote_success(
    from_token: Token, to_token: Token, from_amount: int, to_amount: int, protocols=None
) -> QuoteSuccess:
    return QuoteSuccess.from_payload(
        quote_payload(from_token, to_token, from_amount, to_amount, protocols)
    )


Answer = Union[QuoteResult, Callable[[int], QuoteResult], Exception]


class ScriptedQuoteProvider:
    """
    Quote provider answering from a table keyed by (from_address, to_address).

    Values are a fixed result, a callable receiving the amount, or an
    exception to raise. Every call is recorded.
    """

    def __init__(self, answers: Dict[Tuple[str, str], Answer], delay: float = 0.0):
        self.answers = answers
        self.delay = delay
        self.calls: List[Tuple[int, str, str, int]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def request_quote(self, network, from_token, to_token, amount):
        from_addr = getattr(from_token, "address", from_token)
        to_addr = getattr(to_token, "address", to_token)
        self.calls.append((network, from_addr, to_addr, amount))

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            answer = self.answers[(from_addr, to_addr)]
            if isinstance(answer, Exception):
                raise answer
            if callable(answer):
                return answer(amount)
            return answer
        finally:
            self.in_flight -= 1


@pytest.fixture
def usdc():
    return Token(symbol="USDC", address=USDC_ADDR, decimals=6)


@pytest.fixture
def weth():
    return Token(symbol="WETH", address=WETH_ADDR, decimals=18)


@pytest.fixture
def dai():
    return Token(symbol="DAI", address=DAI_ADDR, decimals=18)


@pytest.fixture
def bad_request_failure():
    return QuoteFailure(
        kind=FailureKind.PROVIDER,
        status=400,
        status_text="Bad Request",
        message="insufficient liquidity",
    )
