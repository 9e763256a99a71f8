"""Tests for dex/types.py"""

import pytest

from dex.types import (
    FailureKind,
    ProtocolSplit,
    QuoteFailure,
    QuoteRequest,
    QuoteSuccess,
)
from roundtrip_arbitrage.exceptions import ProviderError

FROM = "0x" + "01" * 20
TO = "0x" + "02" * 20


@pytest.fixture
def payload():
    return {
        "fromToken": {"symbol": "USDC", "decimals": 6, "address": FROM},
        "toToken": {"symbol": "WETH", "decimals": 18, "address": TO},
        "fromTokenAmount": "1000000000",
        "toTokenAmount": "412345678901234567",
        "protocols": [
            [
                [
                    {"name": "POLYGON_QUICKSWAP", "part": 80, "fromTokenAddress": FROM, "toTokenAddress": TO},
                    {"name": "POLYGON_SUSHISWAP", "part": 20, "fromTokenAddress": FROM, "toTokenAddress": TO},
                ]
            ]
        ],
    }


def test_quote_request_params():
    request = QuoteRequest(
        network=137,
        from_token_address=FROM,
        to_token_address=TO,
        amount=10**25,
        protocols=("POLYGON_QUICKSWAP", "POLYGON_CURVE"),
        main_route_parts=50,
    )
    assert request.to_params() == {
        "fromTokenAddress": FROM,
        "toTokenAddress": TO,
        "amount": "10000000000000000000000000",
        "mainRouteParts": "50",
        "protocols": "POLYGON_QUICKSWAP,POLYGON_CURVE",
    }


def test_quote_request_without_protocols_omits_param():
    request = QuoteRequest(network=1, from_token_address=FROM, to_token_address=TO, amount=1)
    assert "protocols" not in request.to_params()


def test_quote_success_from_payload(payload):
    quote = QuoteSuccess.from_payload(payload)

    assert quote.ok is True
    assert quote.from_token.symbol == "USDC"
    assert quote.to_token.decimals == 18
    assert quote.from_token_amount == 1_000_000_000
    assert quote.to_token_amount == 412345678901234567
    assert quote.protocols[0][0][0] == ProtocolSplit(
        name="POLYGON_QUICKSWAP", part=80.0, to_token_address=TO, from_token_address=FROM
    )


def test_quote_success_keeps_large_amounts_exact(payload):
    payload["toTokenAmount"] = "123456789012345678901234567890"
    assert QuoteSuccess.from_payload(payload).to_token_amount == 123456789012345678901234567890


def test_quote_success_without_protocols(payload):
    payload["protocols"] = None
    assert QuoteSuccess.from_payload(payload).protocols == []


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("toTokenAmount"),
        lambda p: p.update(toTokenAmount="12.5"),
        lambda p: p.update(toTokenAmount="-1"),
        lambda p: p["fromToken"].pop("decimals"),
        lambda p: p.update(protocols=[[[{"part": 100}]]]),
        lambda p: p.update(protocols=[[[]]]),
    ],
)
def test_malformed_payload_raises_provider_error(payload, mutate):
    mutate(payload)
    with pytest.raises(ProviderError, match="malformed quote response"):
        QuoteSuccess.from_payload(payload)


def test_empty_hop_is_rejected(payload):
    payload["protocols"] = [[payload["protocols"][0][0], []]]
    with pytest.raises(ProviderError, match="empty hop"):
        QuoteSuccess.from_payload(payload)


def test_non_dict_payload_raises_provider_error():
    with pytest.raises(ProviderError):
        QuoteSuccess.from_payload(["not", "a", "quote"])


class TestQuoteFailureLog:
    def test_full_detail(self):
        failure = QuoteFailure(
            kind=FailureKind.PROVIDER,
            status=400,
            status_text="Bad Request",
            message="insufficient liquidity",
        )
        assert failure.ok is False
        assert failure.log_message == "400: Bad Request (insufficient liquidity)"

    def test_status_without_message(self):
        failure = QuoteFailure(kind=FailureKind.PROVIDER, status=502, status_text="Bad Gateway")
        assert failure.log_message == "502: Bad Gateway ()"

    def test_transport_message_only(self):
        failure = QuoteFailure(kind=FailureKind.TRANSPORT, message="Connection refused")
        assert failure.log_message == "Connection refused"

    def test_no_detail(self):
        assert QuoteFailure(kind=FailureKind.TRANSPORT).log_message == ""
