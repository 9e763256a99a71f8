"""
Route extraction from the aggregator's protocol split tree.

The quote response nests splits three levels deep: alternative routes, hops
along a route, and parallel protocol splits within a hop. Only the primary
route (index 0) is read, and each hop is reduced to its dominant split.
"""

from typing import Iterable, List, Mapping, Optional, Sequence

from .types import ProtocolSplit, Route, RouteStep, SplitTree


def select_dominant_split(hop: Sequence[ProtocolSplit]) -> ProtocolSplit:
    """
    Pick the split carrying the largest share of a hop.

    Ties keep the earliest split: a later split only wins with a strictly
    greater part.

    Raises:
        ValueError: If the hop has no splits
    """
    if not hop:
        raise ValueError("Cannot select a protocol from an empty hop")

    best = hop[0]
    for split in hop[1:]:
        if split.part > best.part:
            best = split
    return best


def normalize_address(address: str, normalizations: Optional[Mapping[str, str]]) -> str:
    """
    Substitute a native coin address with its wrapped token address.

    Matching is case-insensitive; unknown addresses pass through unchanged.
    """
    if not normalizations:
        return address
    for native, wrapped in normalizations.items():
        if address.lower() == native.lower():
            return wrapped
    return address


def normalize_route(
    route: Iterable[RouteStep], normalizations: Optional[Mapping[str, str]]
) -> Route:
    """Apply :func:`normalize_address` to every step of a route."""
    return [
        RouteStep(
            name=step.name,
            to_token_address=normalize_address(step.to_token_address, normalizations),
        )
        for step in route
    ]


def extract_route(
    split_tree: SplitTree, normalizations: Optional[Mapping[str, str]] = None
) -> Route:
    """
    Flatten the primary route of a split tree into one step per hop.

    Args:
        split_tree: Nested ``routes -> hops -> splits`` structure of a quote
        normalizations: Optional ``{native_address: wrapped_address}`` table

    Returns:
        Ordered route steps of the primary route (empty if there is none)
    """
    if not split_tree:
        return []

    route = []
    for hop in split_tree[0]:
        best = select_dominant_split(hop)
        route.append(RouteStep(name=best.name, to_token_address=best.to_token_address))

    return normalize_route(route, normalizations)


def format_route(route: Optional[Route], symbol_of: Optional[Mapping[str, str]] = None) -> str:
    """Format a route for log output, e.g. ``QUICKSWAP→WETH › SUSHI→USDC``."""
    if route is None:
        return "-"

    lookup = {addr.lower(): sym for addr, sym in (symbol_of or {}).items()}
    parts: List[str] = []
    for step in route:
        target = lookup.get(step.to_token_address.lower(), step.to_token_address)
        parts.append(f"{step.name}→{target}")
    return " › ".join(parts)
