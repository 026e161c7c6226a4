"""Uniswap V2 style market discovery, reserve sync and swap pricing."""

from uniswappy.amm import Market, UniswapV2Pair, get_amount_in, get_amount_out
from uniswappy.config import DEFAULT_CONFIG, MarketConfig
from uniswappy.discovery import (
    GroupedMarkets,
    MarketGraph,
    discover_all_markets,
    discover_markets,
    sync_reserves,
)

__version__ = "0.1.0"
__all__ = [
    "Market",
    "UniswapV2Pair",
    "get_amount_out",
    "get_amount_in",
    "MarketConfig",
    "DEFAULT_CONFIG",
    "GroupedMarkets",
    "MarketGraph",
    "discover_markets",
    "discover_all_markets",
    "sync_reserves",
    "__version__",
]
