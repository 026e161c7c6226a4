"""Market discovery, graph building and reserve sync."""

from uniswappy.discovery.engine import discover_all_markets, discover_markets
from uniswappy.discovery.graph import (
    GroupedMarkets,
    MarketGraph,
    drop_singletons,
    filter_by_liquidity,
    flatten,
    group_by_non_pivot,
    non_pivot_token,
)
from uniswappy.discovery.protocols import PairLookup, PairStore, ReserveQuery
from uniswappy.discovery.stores import InMemoryPairStore, JsonFilePairStore
from uniswappy.discovery.sync import sync_reserves

__all__ = [
    # Engine
    "discover_markets",
    "discover_all_markets",
    # Graph
    "MarketGraph",
    "GroupedMarkets",
    "non_pivot_token",
    "group_by_non_pivot",
    "drop_singletons",
    "flatten",
    "filter_by_liquidity",
    # Sync
    "sync_reserves",
    # Capabilities
    "PairLookup",
    "ReserveQuery",
    "PairStore",
    "InMemoryPairStore",
    "JsonFilePairStore",
]
