"""Market graph construction keyed by the non-pivot token.

Every market in the graph trades some token against the pivot (WETH by
default). Two passes run around a reserve sync:

1. group_by_non_pivot + drop_singletons: a token reachable through a single
   pool offers no cross-pool arbitrage, so its market is never synced.
2. filter_by_liquidity: once reserves are known, keep markets whose pivot
   reserve exceeds the floor and regroup. Singleton buckets may remain here.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TypeAlias

from uniswappy.amm.base import Market
from uniswappy.constants import WETH
from uniswappy.errors import MalformedMarket, MarketError
from uniswappy.models.types import normalize_address

# Non-pivot token -> markets trading it against the pivot
MarketGraph: TypeAlias = dict[str, list[Market]]


def non_pivot_token(market: Market, pivot: str = WETH) -> str:
    """Return the token of `market` that is not the pivot.

    Raises:
        MalformedMarket: If both tokens or neither token is the pivot
    """
    pivot_norm = normalize_address(pivot)
    token0, token1 = market.tokens
    if token0 == pivot_norm and token1 != pivot_norm:
        return token1
    if token1 == pivot_norm and token0 != pivot_norm:
        return token0
    raise MalformedMarket(
        f"Market {market.address} must contain pivot {pivot_norm} exactly once, "
        f"has {token0} / {token1}"
    )


def group_by_non_pivot(markets: Iterable[Market], pivot: str = WETH) -> MarketGraph:
    """Bucket markets by their non-pivot token, preserving input order."""
    graph: MarketGraph = {}
    for market in markets:
        graph.setdefault(non_pivot_token(market, pivot), []).append(market)
    return graph


def drop_singletons(graph: MarketGraph) -> MarketGraph:
    """Keep only tokens traded in more than one market."""
    return {token: markets for token, markets in graph.items() if len(markets) > 1}


def flatten(graph: MarketGraph) -> list[Market]:
    """All markets of a graph, bucket by bucket."""
    return [market for markets in graph.values() for market in markets]


def filter_by_liquidity(
    markets: Iterable[Market],
    floor: int,
    pivot: str = WETH,
) -> MarketGraph:
    """Drop markets whose pivot reserve does not exceed `floor`, then regroup.

    Args:
        markets: Markets with synced reserves
        floor: Exclusive minimum pivot-side reserve (in pivot base units)
        pivot: Pivot token address

    Returns:
        Graph of surviving markets grouped by non-pivot token

    Raises:
        MalformedMarket: If a market does not contain the pivot exactly once
    """
    pivot_norm = normalize_address(pivot)
    graph: MarketGraph = {}
    for market in markets:
        token = non_pivot_token(market, pivot_norm)
        if market.get_balance(pivot_norm) > floor:
            graph.setdefault(token, []).append(market)
    return graph


@dataclass
class GroupedMarkets:
    """Result of bootstrapping the market graph.

    Attributes:
        markets_by_token: Final graph after the liquidity filter
        all_market_pairs: Candidate markets that were reserve-synced
        failed_factories: Factories excluded after a discovery error
    """

    markets_by_token: MarketGraph = field(default_factory=dict)
    all_market_pairs: list[Market] = field(default_factory=list)
    failed_factories: dict[str, MarketError] = field(default_factory=dict)

    @property
    def token_count(self) -> int:
        """Number of tokens in the final graph."""
        return len(self.markets_by_token)

    @property
    def market_count(self) -> int:
        """Number of markets in the final graph."""
        return sum(len(markets) for markets in self.markets_by_token.values())


__all__ = [
    "MarketGraph",
    "GroupedMarkets",
    "non_pivot_token",
    "group_by_non_pivot",
    "drop_singletons",
    "flatten",
    "filter_by_liquidity",
]
