"""
Async client for a 1inch-style swap quote API.

Issues ``GET {base_url}/{network}/quote`` requests and classifies every
outcome into a ``QuoteSuccess`` or a ``QuoteFailure``. Transport and provider
errors never escape :meth:`QuoteClient.request_quote`.
"""

import asyncio
from typing import Any, Iterable, Optional, Union

import aiohttp

from roundtrip_arbitrage.exceptions import (
    NetworkError,
    ProviderError,
    QuoteError,
    ValidationError,
)
from roundtrip_arbitrage.utils import get_logger

from .types import (
    FailureKind,
    QuoteFailure,
    QuoteRequest,
    QuoteResult,
    QuoteSuccess,
    Token,
)

logger = get_logger(__name__)

DEFAULT_API_URL = "https://api.1inch.exchange/v4.0"
DEFAULT_MAIN_ROUTE_PARTS = 50


def _address_of(token: Union[Token, str]) -> str:
    return token.address if isinstance(token, Token) else token


class QuoteClient:
    """
    Quote requester backed by an aiohttp session.

    The client owns its session only when it created it; a session passed in
    by the caller is left open by :meth:`close`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        protocols: Iterable[str] = (),
        main_route_parts: int = DEFAULT_MAIN_ROUTE_PARTS,
        timeout_sec: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root without trailing slash (e.g., ".../v4.0")
            protocols: Allow-list of liquidity protocols sent with every quote
            main_route_parts: Routing fan-out parameter
            timeout_sec: Total timeout of a single request
            session: Optional externally managed session
        """
        self.base_url = base_url.rstrip("/")
        self.protocols = tuple(protocols)
        self.main_route_parts = main_route_parts
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "QuoteClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def build_request(
        self,
        network: int,
        from_token: Union[Token, str],
        to_token: Union[Token, str],
        amount: int,
    ) -> QuoteRequest:
        """
        Validate inputs and build a quote request.

        Raises:
            ValidationError: If amount is negative or both tokens are the same
        """
        from_address = _address_of(from_token)
        to_address = _address_of(to_token)

        if amount < 0:
            raise ValidationError(f"Quote amount must be non-negative, got {amount}")
        if from_address.lower() == to_address.lower():
            raise ValidationError(f"Cannot quote a token against itself: {from_address}")

        return QuoteRequest(
            network=network,
            from_token_address=from_address,
            to_token_address=to_address,
            amount=int(amount),
            protocols=self.protocols,
            main_route_parts=self.main_route_parts,
        )

    def quote_url(self, network: int) -> str:
        return f"{self.base_url}/{network}/quote"

    async def request_quote(
        self,
        network: int,
        from_token: Union[Token, str],
        to_token: Union[Token, str],
        amount: int,
    ) -> QuoteResult:
        """
        Quote selling ``amount`` of from_token for to_token.

        Returns:
            QuoteSuccess on a well-formed 2xx answer, QuoteFailure otherwise

        Raises:
            ValidationError: If the request itself is invalid
        """
        request = self.build_request(network, from_token, to_token, amount)
        url = self.quote_url(network)

        logger.debug(
            f"Quote {request.from_token_address} -> {request.to_token_address} "
            f"amount={request.amount} on {network}"
        )

        try:
            payload = await self._get_json(url, request)
            return QuoteSuccess.from_payload(payload)
        except QuoteError as e:
            failure = self._classify(e)
            logger.warning(f"Quote failed ({failure.kind.value}): {failure.log_message}")
            return failure

    async def _get_json(self, url: str, request: QuoteRequest) -> Any:
        """
        Perform the HTTP call.

        Raises:
            ProviderError: On non-2xx answers or undecodable bodies
            NetworkError: On connection errors and timeouts
        """
        session = self._get_session()
        try:
            async with session.get(url, params=request.to_params(), timeout=self.timeout) as resp:
                body = await self._read_body(resp)

                if resp.status >= 400:
                    error_message = None
                    if isinstance(body, dict):
                        error_message = body.get("error") or body.get("description")
                    raise ProviderError(
                        f"Quote provider returned {resp.status}",
                        endpoint=url,
                        status_code=resp.status,
                        status_text=resp.reason,
                        error_message=error_message,
                    )

                if body is None:
                    raise ProviderError(
                        "malformed quote response: body is not JSON",
                        endpoint=url,
                        status_code=resp.status,
                        status_text=resp.reason,
                    )
                return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(str(e) or type(e).__name__, endpoint=url) from e

    @staticmethod
    async def _read_body(resp: aiohttp.ClientResponse) -> Any:
        try:
            return await resp.json(content_type=None)
        except ValueError:
            return None

    @staticmethod
    def _classify(error: QuoteError) -> QuoteFailure:
        if isinstance(error, NetworkError):
            return QuoteFailure(kind=FailureKind.TRANSPORT, message=str(error))

        if isinstance(error, ProviderError) and error.error_message is not None:
            message = error.error_message
        else:
            message = None if error.status_code and error.status_code >= 400 else str(error)

        return QuoteFailure(
            kind=FailureKind.PROVIDER,
            status=error.status_code,
            status_text=getattr(error, "status_text", None),
            message=message,
        )
