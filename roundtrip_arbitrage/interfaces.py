"""
Dependency injection interfaces for improved testability and modularity.

Provides lightweight protocols for the external collaborators of the
evaluator: the quote provider and the presentation sink.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from dex.types import QuoteResult, Token


@runtime_checkable
class QuoteProvider(Protocol):
    """Protocol for a swap quote source."""

    async def request_quote(
        self,
        network: int,
        from_token: Union["Token", str],
        to_token: Union["Token", str],
        amount: int,
    ) -> "QuoteResult":
        """Quote selling ``amount`` of from_token for to_token."""
        ...


@runtime_checkable
class PresentationSink(Protocol):
    """Protocol for something that displays one row per token pair."""

    def update_row(
        self, key: str, fields: Dict[str, Any], style: Optional[str] = None
    ) -> None:
        """Merge a partial row update; ``style`` is a semantic color key."""
        ...
