"""
Core data types for round-trip arbitrage evaluation.

Amounts are kept as smallest-unit integers everywhere; conversion to decimals
happens only when building display values.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from roundtrip_arbitrage.exceptions import ProviderError


@dataclass(frozen=True)
class Token:
    """
    Token metadata from the registry.

    Attributes:
        symbol: Ticker symbol (e.g., "USDC")
        address: Checksum address of the token contract
        decimals: Decimal precision of the token
    """

    symbol: str
    address: str
    decimals: int


@dataclass(frozen=True)
class QuoteRequest:
    """
    Parameters of a single quote call.

    Attributes:
        network: Chain id used as the API path segment
        from_token_address: Address of the token being sold
        to_token_address: Address of the token being bought
        amount: Amount to sell in the from-token's smallest unit
        protocols: Allow-list of liquidity protocols
        main_route_parts: Routing fan-out of the main route
    """

    network: int
    from_token_address: str
    to_token_address: str
    amount: int
    protocols: Tuple[str, ...] = ()
    main_route_parts: int = 50

    def to_params(self) -> Dict[str, str]:
        """Build the query string parameters for the quote endpoint."""
        params = {
            "fromTokenAddress": self.from_token_address,
            "toTokenAddress": self.to_token_address,
            "amount": str(self.amount),
            "mainRouteParts": str(self.main_route_parts),
        }
        if self.protocols:
            params["protocols"] = ",".join(self.protocols)
        return params


@dataclass(frozen=True)
class TokenInfo:
    """Token metadata echoed back by the quote provider."""

    symbol: str
    decimals: int
    address: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TokenInfo":
        return cls(
            symbol=str(payload["symbol"]),
            decimals=int(payload["decimals"]),
            address=str(payload["address"]),
        )


@dataclass(frozen=True)
class ProtocolSplit:
    """
    One liquidity source inside a hop.

    ``part`` is only meaningful relative to the other splits of the same hop.
    """

    name: str
    part: float
    to_token_address: str
    from_token_address: str = ""

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ProtocolSplit":
        return cls(
            name=str(payload["name"]),
            part=float(payload["part"]),
            to_token_address=str(payload["toTokenAddress"]),
            from_token_address=str(payload.get("fromTokenAddress", "")),
        )


# routes -> hops -> parallel splits
SplitTree = List[List[List[ProtocolSplit]]]


@dataclass
class QuoteSuccess:
    """Successful quote: echoed tokens, amounts and the protocol split tree."""

    from_token: TokenInfo
    to_token: TokenInfo
    from_token_amount: int
    to_token_amount: int
    protocols: SplitTree = field(default_factory=list)

    ok = True

    @classmethod
    def from_payload(cls, payload: Any) -> "QuoteSuccess":
        """
        Parse a quote response body.

        Raises:
            ProviderError: If the body does not have the expected shape
        """
        try:
            protocols = [
                [[ProtocolSplit.from_payload(split) for split in hop] for hop in route]
                for route in payload.get("protocols") or []
            ]
            if any(not hop for route in protocols for hop in route):
                raise ValueError("empty hop")
            from_amount = int(payload["fromTokenAmount"])
            to_amount = int(payload["toTokenAmount"])
            if from_amount < 0 or to_amount < 0:
                raise ValueError("negative token amount")
            return cls(
                from_token=TokenInfo.from_payload(payload["fromToken"]),
                to_token=TokenInfo.from_payload(payload["toToken"]),
                from_token_amount=from_amount,
                to_token_amount=to_amount,
                protocols=protocols,
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"malformed quote response: {e!r}")


class FailureKind(str, Enum):
    """Why a quote request failed."""

    TRANSPORT = "transport"
    PROVIDER = "provider"


@dataclass
class QuoteFailure:
    """Failed quote with whatever detail the provider returned."""

    kind: FailureKind
    status: Optional[int] = None
    status_text: Optional[str] = None
    message: Optional[str] = None

    ok = False

    @property
    def log_message(self) -> str:
        """Human readable failure line, e.g. ``400: Bad Request (insufficient liquidity)``."""
        if self.status is not None:
            return f"{self.status}: {self.status_text or ''} ({self.message or ''})"
        return self.message or ""


QuoteResult = Union[QuoteSuccess, QuoteFailure]


@dataclass(frozen=True)
class RouteStep:
    """Dominant protocol of one hop and the token it routes into."""

    name: str
    to_token_address: str


Route = List[RouteStep]


@dataclass
class ArbitrageEvaluation:
    """
    Result of one round-trip evaluation.

    Attributes:
        from_token: Symbol of the token the round trip starts and ends in
        to_token: Symbol of the intermediate token
        is_profitable: True if the return leg beats loan + margin
        outbound_route: Route of the A -> B leg (None on failure)
        return_route: Route of the B -> A leg (None on failure)
        from_token_amount: Loan amount in whole tokens (display only)
        to_token_amount: Amount returned by the round trip (display only)
        difference: to_token_amount - from_token_amount (display only)
        percentage: difference relative to the loan in percent (display only)
        base_amount: Loan amount in smallest units
        threshold_amount: Loan + margin in smallest units
        final_amount: Return leg output in smallest units
        log: Failure description, empty on success
        failure: Failure detail of the leg that failed
        failed_leg: "outbound" or "return" when a leg failed
    """

    from_token: str
    to_token: str
    is_profitable: bool = False
    outbound_route: Optional[Route] = None
    return_route: Optional[Route] = None
    from_token_amount: Optional[float] = None
    to_token_amount: Optional[float] = None
    difference: Optional[float] = None
    percentage: Optional[float] = None
    base_amount: Optional[int] = None
    threshold_amount: Optional[int] = None
    final_amount: Optional[int] = None
    log: str = ""
    failure: Optional[QuoteFailure] = None
    failed_leg: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        for key in ("base_amount", "threshold_amount", "final_amount"):
            if data[key] is not None:
                data[key] = str(data[key])
        if self.failure is not None:
            data["failure"]["kind"] = self.failure.kind.value
        return data
