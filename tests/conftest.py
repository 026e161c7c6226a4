"""Pytest configuration and fixtures."""

import pytest

from uniswappy.config import MarketConfig
from uniswappy.discovery.stores import InMemoryPairStore
from tests.helpers import (
    DAI,
    ETHER,
    LINK,
    SUSHISWAP_FACTORY,
    UNI,
    UNISWAP_FACTORY,
    USDC,
    WETH,
    addr,
)

# =============================================================================
# Mock classes for dependency injection
# =============================================================================


class MockPairLookup:
    """Mock pair lookup serving each factory's registry from a list.

    Implements both PairLookup and ReserveQuery so a single instance can
    stand in for the on-chain query contract.

    Usage:
        # Registry rows per factory, reserves per pair address
        lookup = MockPairLookup(
            registries={UNISWAP_FACTORY: [(WETH, DAI, addr(1))]},
            reserves={addr(1): (10 * ETHER, 5000 * ETHER)},
        )

        # Simulate an unavailable factory
        lookup = MockPairLookup(registries=..., failing_factories={SUSHISWAP_FACTORY})
    """

    def __init__(
        self,
        registries: dict[str, list[tuple[str, str, str]]] | None = None,
        reserves: dict[str, tuple[int, ...]] | None = None,
        failing_factories: set[str] | None = None,
        fail_reserves: bool = False,
    ) -> None:
        self.registries = {k.lower(): v for k, v in (registries or {}).items()}
        self.reserves = {k.lower(): v for k, v in (reserves or {}).items()}
        self.failing_factories = {f.lower() for f in failing_factories or set()}
        self.fail_reserves = fail_reserves
        # Track calls for assertions
        self.page_calls: list[tuple[str, int, int]] = []
        self.reserve_calls: list[list[str]] = []

    def get_pairs_by_index_range(self, factory: str, start: int, stop: int) -> list[tuple[str, str, str]]:
        """Return registry rows [start, stop) for a factory."""
        self.page_calls.append((factory, start, stop))
        if factory.lower() in self.failing_factories:
            raise ConnectionError(f"RPC timeout for {factory}")
        return self.registries.get(factory.lower(), [])[start:stop]

    def get_reserves_by_pairs(self, pair_addresses: list[str]) -> list[tuple[int, ...]]:
        """Return reserve rows in request order (zeros for unknown pairs)."""
        self.reserve_calls.append(list(pair_addresses))
        if self.fail_reserves:
            raise ConnectionError("RPC timeout")
        return [self.reserves.get(a.lower(), (0, 0, 0)) for a in pair_addresses]

    def page_calls_for(self, factory: str) -> list[tuple[str, int, int]]:
        return [call for call in self.page_calls if call[0] == factory.lower()]


class MockReserveQuery:
    """Mock reserve query with an explicit response.

    Usage:
        # Respond with fixed rows regardless of the request
        query = MockReserveQuery(rows=[(1, 2, 0), (3, 4, 0)])

        # Raise on every call
        query = MockReserveQuery(error=ConnectionError("down"))
    """

    def __init__(
        self,
        rows: list[tuple[int, ...]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.rows = rows or []
        self.error = error
        self.calls: list[list[str]] = []

    def get_reserves_by_pairs(self, pair_addresses: list[str]) -> list[tuple[int, ...]]:
        self.calls.append(list(pair_addresses))
        if self.error is not None:
            raise self.error
        return list(self.rows)


class RecordingSwapEncoder:
    """SwapEncoder that records its arguments and returns readable calldata."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, int, str, bytes]] = []

    def encode_swap(self, amount0_out: int, amount1_out: int, recipient: str, data: bytes) -> str:
        self.calls.append((amount0_out, amount1_out, recipient, data))
        return f"0x{amount0_out:064x}{amount1_out:064x}"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryPairStore:
    """Empty in-memory pair store."""
    return InMemoryPairStore()


@pytest.fixture
def recording_encoder() -> RecordingSwapEncoder:
    return RecordingSwapEncoder()


@pytest.fixture
def small_batch_config() -> MarketConfig:
    """Config paging two pairs at a time."""
    return MarketConfig(batch_size=2, batch_count_limit=10)


@pytest.fixture
def two_factory_lookup() -> MockPairLookup:
    """Two factories sharing DAI and LINK markets; UNI and USDC on one side only.

    After discovery and sync:
    - DAI: two markets, both above the 5 ETH floor
    - LINK: two candidates, only the Uniswap one above the floor
    - UNI: single market, dropped before sync
    - USDC: two markets, both below the floor
    """
    return MockPairLookup(
        registries={
            UNISWAP_FACTORY: [
                (WETH, DAI, addr(1)),
                (LINK, WETH, addr(2)),
                (WETH, UNI, addr(3)),
                (DAI, USDC, addr(4)),  # no pivot
                (WETH, USDC, addr(5)),
            ],
            SUSHISWAP_FACTORY: [
                (DAI, WETH, addr(11)),
                (WETH, LINK, addr(12)),
                (USDC, WETH, addr(13)),
            ],
        },
        reserves={
            addr(1): (100 * ETHER, 250_000 * ETHER, 0),
            addr(2): (40_000 * ETHER, 60 * ETHER, 0),
            addr(3): (900 * ETHER, 90_000 * ETHER, 0),
            addr(5): (1 * ETHER, 2_500 * 10**6, 0),
            addr(11): (120_000 * ETHER, 50 * ETHER, 0),
            addr(12): (4 * ETHER, 2_600 * ETHER, 0),
            addr(13): (5_000 * 10**6, 2 * ETHER, 0),
        },
    )
