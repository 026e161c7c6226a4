"""Market discovery across Uniswap V2 style factories.

Discovery pages through each factory's pair registry, keeps pairs that
trade a token against the pivot, records new pairs in the pair store and
builds zero-reserve markets. The bootstrap entry point then builds the
market graph around one batched reserve sync.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import AbstractContextManager, nullcontext

import structlog

from uniswappy.amm.encoding import SwapEncoder
from uniswappy.amm.uniswap_v2 import UniswapV2Pair
from uniswappy.config import DEFAULT_CONFIG, MarketConfig
from uniswappy.constants import protocol_for_factory
from uniswappy.discovery.graph import (
    GroupedMarkets,
    drop_singletons,
    filter_by_liquidity,
    flatten,
    group_by_non_pivot,
)
from uniswappy.discovery.protocols import PairLookup, PairStore, ReserveQuery
from uniswappy.discovery.sync import sync_reserves
from uniswappy.errors import LookupUnavailable, MalformedMarket, MarketError
from uniswappy.models.records import PairRecord
from uniswappy.models.types import is_valid_address, normalize_address

logger = structlog.get_logger()


def _fetch_page(lookup: PairLookup, factory: str, start: int, stop: int) -> list[Sequence[str]]:
    try:
        return list(lookup.get_pairs_by_index_range(factory, start, stop))
    except LookupUnavailable:
        raise
    except Exception as e:
        raise LookupUnavailable(
            f"Pair lookup failed for factory {factory} range [{start}, {stop}): {e}",
            factory=factory,
        ) from e


def _parse_row(factory: str, row: Sequence[str]) -> tuple[str, str, str]:
    """Normalize a (token_a, token_b, pair) registry row.

    Raises:
        MalformedMarket: If the row is not three valid addresses
    """
    if isinstance(row, str) or len(row) != 3:
        raise MalformedMarket(f"Expected (token_a, token_b, pair) from {factory}, got {row!r}")
    values = []
    for value in row:
        if not isinstance(value, str) or not is_valid_address(normalize_address(value)):
            raise MalformedMarket(f"Invalid address {value!r} in row {row!r} from {factory}")
        values.append(normalize_address(value))
    token_a, token_b, market_address = values
    return token_a, token_b, market_address


def discover_markets(
    lookup: PairLookup,
    store: PairStore,
    factory_address: str,
    config: MarketConfig = DEFAULT_CONFIG,
    encoder: SwapEncoder | None = None,
    store_lock: threading.Lock | None = None,
) -> list[UniswapV2Pair]:
    """Discover new pivot markets listed by one factory.

    Pages are requested one at a time as (factory, offset, offset + batch_size).
    A page shorter than batch_size ends the registry; batch_count_limit caps
    the number of pages.

    Args:
        lookup: Pair lookup capability
        store: Pair store; pairs it already knows are skipped
        factory_address: Factory whose registry is paged
        config: Pivot, denylist and pagination settings
        encoder: Calldata encoder handed to every built market
        store_lock: Held around each exists/save pair so factories sharing
            a store cannot both claim the same pair

    Returns:
        Newly discovered markets with zero reserves, tokens in registry order

    Raises:
        LookupUnavailable: If any page request fails (no partial result)
        MalformedMarket: If the lookup returns a row that is not three addresses.
            Nothing from the offending page is saved.
    """
    factory = normalize_address(factory_address)
    guard: AbstractContextManager[object] = store_lock if store_lock is not None else nullcontext()
    pivot = config.pivot_token
    protocol = protocol_for_factory(factory)

    markets: list[UniswapV2Pair] = []
    seen: set[str] = set()
    batches = 0

    for batch_index in range(config.batch_count_limit):
        start = batch_index * config.batch_size
        stop = start + config.batch_size
        pairs = _fetch_page(lookup, factory, start, stop)
        batches += 1
        logger.debug("pairs_batch_fetched", factory=factory, start=start, count=len(pairs))

        # Validate the whole page before anything is saved
        rows = [_parse_row(factory, pair) for pair in pairs]

        for token_a, token_b, market_address in rows:
            if token_a == pivot and token_b != pivot:
                token = token_b
            elif token_b == pivot and token_a != pivot:
                token = token_a
            else:
                continue

            if config.is_denylisted(token):
                logger.debug("pair_denylisted", market=market_address, token=token)
                continue
            if market_address in seen:
                continue
            with guard:
                if store.exists(market_address):
                    logger.debug("pair_already_exists", market=market_address)
                    continue
                store.save(
                    PairRecord(
                        market_address=market_address,
                        token0=token_a,
                        token1=token_b,
                        factory_address=factory,
                    )
                )
            seen.add(market_address)
            markets.append(
                UniswapV2Pair(
                    market_address,
                    (token_a, token_b),
                    protocol,
                    encoder=encoder,
                    fee_numerator=config.fee_numerator,
                    fee_denominator=config.fee_denominator,
                )
            )

        if len(pairs) < config.batch_size:
            break
    else:
        logger.warning(
            "batch_count_limit_reached",
            factory=factory,
            batch_count_limit=config.batch_count_limit,
            batch_size=config.batch_size,
        )

    logger.info("factory_markets_discovered", factory=factory, batches=batches, count=len(markets))
    return markets


def discover_all_markets(
    lookup: PairLookup,
    store: PairStore,
    factory_addresses: Sequence[str],
    *,
    reserve_query: ReserveQuery | None = None,
    config: MarketConfig = DEFAULT_CONFIG,
    isolate_failures: bool = True,
    encoder: SwapEncoder | None = None,
) -> GroupedMarkets:
    """Discover markets on every factory and build the market graph.

    Factories are discovered in parallel on a thread pool and joined at a
    single point. Results are flattened in factory order, grouped by
    non-pivot token, singletons dropped, synced in one batch and filtered
    by the liquidity floor.

    Args:
        lookup: Pair lookup capability
        store: Pair store shared by all factory tasks. Each exists/save pair
            runs under one lock, so a pair listed by two factories is claimed once.
        factory_addresses: Factories to discover (duplicates ignored)
        reserve_query: Reserve query capability. Defaults to `lookup`.
        config: Discovery and filter settings
        isolate_failures: If True, a factory raising MarketError is logged,
            recorded in failed_factories and excluded. If False, the first
            failure in factory order propagates.
        encoder: Calldata encoder handed to every built market

    Returns:
        GroupedMarkets with the final graph and the synced candidates

    Raises:
        MarketError: A factory failure when isolate_failures is False
        SyncUnavailable: If the reserve sync fails
    """
    factories = list(dict.fromkeys(normalize_address(f) for f in factory_addresses))
    query: ReserveQuery = reserve_query if reserve_query is not None else lookup  # type: ignore[assignment]
    logger.info("discovering_markets", factory_count=len(factories))

    discovered: dict[str, list[UniswapV2Pair]] = {}
    failed: dict[str, MarketError] = {}

    if factories:
        store_lock = threading.Lock()
        max_workers = config.max_workers or len(factories)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="discovery") as executor:
            futures: dict[str, Future[list[UniswapV2Pair]]] = {
                factory: executor.submit(
                    discover_markets, lookup, store, factory, config, encoder, store_lock
                )
                for factory in factories
            }

        for factory, future in futures.items():
            try:
                discovered[factory] = future.result()
            except MarketError as e:
                if not isolate_failures:
                    raise
                logger.warning(
                    "factory_discovery_failed",
                    factory=factory,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                failed[factory] = e

    all_markets = [market for factory in factories for market in discovered.get(factory, [])]
    candidates = drop_singletons(group_by_non_pivot(all_markets, config.pivot_token))
    all_market_pairs = flatten(candidates)

    sync_reserves(query, all_market_pairs)

    markets_by_token = filter_by_liquidity(
        all_market_pairs, config.liquidity_floor, config.pivot_token
    )

    logger.info(
        "market_graph_built",
        discovered=len(all_markets),
        candidates=len(all_market_pairs),
        tokens=len(markets_by_token),
        markets=sum(len(markets) for markets in markets_by_token.values()),
        failed_factories=len(failed),
    )

    return GroupedMarkets(
        markets_by_token=markets_by_token,
        all_market_pairs=all_market_pairs,
        failed_factories=failed,
    )


__all__ = ["discover_markets", "discover_all_markets"]
