"""Capabilities consumed by discovery and reserve sync.

Implementations carry their own timeout and retry policy. Discovery and
sync wrap whatever they raise into LookupUnavailable / SyncUnavailable.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from uniswappy.models.records import PairRecord


@runtime_checkable
class PairLookup(Protocol):
    """Paginated view of a factory's pair registry."""

    def get_pairs_by_index_range(
        self,
        factory: str,
        start: int,
        stop: int,
    ) -> Sequence[Sequence[str]]:
        """Return pairs with registry index in [start, stop).

        Args:
            factory: Factory address
            start: First registry index
            stop: One past the last registry index

        Returns:
            Rows of (token_a, token_b, pair_address). Fewer than
            stop - start rows means the registry is exhausted.
        """
        ...


@runtime_checkable
class ReserveQuery(Protocol):
    """Batched reserve reads for many pairs."""

    def get_reserves_by_pairs(self, pair_addresses: Sequence[str]) -> Sequence[Sequence[int]]:
        """Return one (reserve0, reserve1[, block_timestamp_last]) row per pair.

        Rows are ordered identically to `pair_addresses`.
        """
        ...


@runtime_checkable
class PairStore(Protocol):
    """Persistence of discovered pair metadata, keyed by pair address."""

    def exists(self, market_address: str) -> bool:
        """Whether a record for this pair address was saved before."""
        ...

    def save(self, record: PairRecord) -> None:
        """Persist a newly discovered pair."""
        ...
