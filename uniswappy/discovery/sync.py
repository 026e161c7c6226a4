"""Batched reserve refresh for a set of markets."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from uniswappy.amm.base import Market
from uniswappy.discovery.protocols import ReserveQuery
from uniswappy.errors import SyncUnavailable

logger = structlog.get_logger()


def _ordered_balances(market: Market, row: Sequence[int]) -> tuple[int, int]:
    try:
        balance0, balance1 = int(row[0]), int(row[1])
    except (IndexError, TypeError, ValueError) as err:
        raise SyncUnavailable(f"Unusable reserve row for {market.address}: {row!r}") from err
    if balance0 < 0 or balance1 < 0:
        raise SyncUnavailable(f"Negative reserves for {market.address}: {row!r}")
    return balance0, balance1


def sync_reserves(query: ReserveQuery, markets: Sequence[Market]) -> int:
    """Refresh reserves of `markets` with one batched query.

    The whole response is validated before any market is touched, so a
    failure leaves every market's reserves as they were. Calling this again
    with unchanged on-chain state is a no-op.

    Args:
        query: Reserve query capability
        markets: Markets to refresh (no query is issued when empty)

    Returns:
        Number of markets whose reserves changed

    Raises:
        SyncUnavailable: If the query fails or its response does not line up
    """
    if not markets:
        return 0

    pair_addresses = [market.address for market in markets]
    logger.debug("updating_reserves", market_count=len(pair_addresses))

    try:
        rows = list(query.get_reserves_by_pairs(pair_addresses))
    except SyncUnavailable:
        raise
    except Exception as e:
        raise SyncUnavailable(f"Reserve query failed for {len(pair_addresses)} pairs: {e}") from e

    if len(rows) != len(markets):
        raise SyncUnavailable(
            f"Reserve query returned {len(rows)} rows for {len(markets)} pairs"
        )

    balances = [_ordered_balances(market, row) for market, row in zip(markets, rows, strict=True)]

    changed = 0
    for market, ordered in zip(markets, balances, strict=True):
        if market.set_reserves(ordered):
            changed += 1

    logger.info("reserves_synced", market_count=len(markets), changed=changed)
    return changed


__all__ = ["sync_reserves"]
