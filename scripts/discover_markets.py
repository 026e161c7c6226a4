"""Script to discover Uniswap V2 style markets and print the market graph.

Pages every factory's pair registry through the UniswapFlashQuery contract,
syncs reserves once and keeps markets above the liquidity floor. Pair
records are kept in a JSON lines file so repeated runs only report new pairs.

Usage:
    python -m scripts.discover_markets --rpc-url https://eth.llamarpc.com \
        --pair-store data/pairs.jsonl --output data/markets.json
"""

import argparse
import json
import logging
import os
from pathlib import Path

import structlog

from uniswappy.config import MarketConfig
from uniswappy.constants import FACTORY_ADDRESSES
from uniswappy.discovery.engine import discover_all_markets
from uniswappy.discovery.graph import GroupedMarkets
from uniswappy.discovery.protocols import PairLookup, PairStore
from uniswappy.discovery.stores import InMemoryPairStore, JsonFilePairStore
from uniswappy.models.api import MarketView

logger = structlog.get_logger()


def build_config(args: argparse.Namespace) -> MarketConfig:
    """Environment settings overridden by explicit command line flags."""
    base = MarketConfig.from_env()
    return MarketConfig(
        pivot_token=base.pivot_token,
        batch_size=args.batch_size or base.batch_size,
        batch_count_limit=args.batch_count_limit or base.batch_count_limit,
        liquidity_floor=(
            args.liquidity_floor if args.liquidity_floor is not None else base.liquidity_floor
        ),
        fee_numerator=base.fee_numerator,
        fee_denominator=base.fee_denominator,
        denylist=base.denylist,
        max_workers=base.max_workers,
    )


def graph_to_json(grouped: GroupedMarkets) -> dict:
    """Serialize the market graph for --output."""
    return {
        "tokens": {
            token: [MarketView.from_market(m).model_dump() for m in markets]
            for token, markets in grouped.markets_by_token.items()
        },
        "failedFactories": {
            factory: f"{type(error).__name__}: {error}"
            for factory, error in grouped.failed_factories.items()
        },
    }


def run_discovery(
    lookup: PairLookup,
    store: PairStore,
    factories: list[str],
    config: MarketConfig,
    output: Path | None = None,
) -> GroupedMarkets:
    """Discover markets and optionally write the graph as JSON."""
    grouped = discover_all_markets(lookup, store, factories, config=config)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w") as f:
            json.dump(graph_to_json(grouped), f, indent=2)
        logger.info("market_graph_written", path=str(output))

    return grouped


def main() -> None:
    """Entry point for the market discovery script."""
    parser = argparse.ArgumentParser(description="Discover Uniswap V2 style arbitrage markets")
    parser.add_argument(
        "--rpc-url",
        default=os.environ.get("RPC_URL"),
        help="Ledger RPC endpoint (default: $RPC_URL)",
    )
    parser.add_argument(
        "--factory",
        action="append",
        dest="factories",
        help="Factory address to discover (repeatable, default: all known factories)",
    )
    parser.add_argument(
        "--pair-store",
        type=Path,
        default=None,
        help="JSON lines file of known pairs (default: in-memory, forgotten on exit)",
    )
    parser.add_argument("--batch-size", type=int, default=None, help="Pairs per registry page")
    parser.add_argument(
        "--batch-count-limit", type=int, default=None, help="Maximum pages per factory"
    )
    parser.add_argument(
        "--liquidity-floor",
        type=int,
        default=None,
        help="Minimum pivot reserve in wei (default: 5 ETH)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Write the graph as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    if not args.rpc_url:
        parser.error("--rpc-url or RPC_URL is required")

    from uniswappy.adapters.web3_query import Web3UniswapQuery

    store: PairStore = JsonFilePairStore(args.pair_store) if args.pair_store else InMemoryPairStore()
    grouped = run_discovery(
        Web3UniswapQuery(args.rpc_url),
        store,
        args.factories or list(FACTORY_ADDRESSES.values()),
        build_config(args),
        args.output,
    )

    print(
        f"\nFound {grouped.market_count} markets across {grouped.token_count} tokens "
        f"with sufficient liquidity to arb"
    )
    for factory, error in grouped.failed_factories.items():
        print(f"  factory {factory} skipped: {error}")


if __name__ == "__main__":
    main()
