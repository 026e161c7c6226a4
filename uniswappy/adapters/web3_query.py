"""UniswapFlashQuery client implementing pair lookup and reserve query via RPC."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from uniswappy.constants import UNISWAP_LOOKUP_CONTRACT_ADDRESS
from uniswappy.errors import LookupUnavailable, SyncUnavailable
from uniswappy.models.types import normalize_address

logger = structlog.get_logger()

# UniswapFlashQuery ABI - minimal, just the functions we need
UNISWAP_QUERY_ABI = [
    {
        "name": "getPairsByIndexRange",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "_uniswapFactory", "type": "address"},
            {"name": "_start", "type": "uint256"},
            {"name": "_stop", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "address[3][]"}],
    },
    {
        "name": "getReservesByPairs",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "_pairs", "type": "address[]"}],
        "outputs": [{"name": "", "type": "uint256[3][]"}],
    },
]


class Web3UniswapQuery:
    """Real lookup/reserve client that calls UniswapFlashQuery via RPC.

    Implements both PairLookup and ReserveQuery, so one instance can be
    passed as `lookup` to discover_all_markets and reused for periodic
    sync_reserves calls. Each method makes a single eth_call.
    """

    def __init__(
        self,
        web3_provider: str,
        query_address: str = UNISWAP_LOOKUP_CONTRACT_ADDRESS,
        timeout: float = 30.0,
    ):
        """Initialize the client with a web3 provider.

        Args:
            web3_provider: HTTP RPC URL (e.g., "https://eth.llamarpc.com")
            query_address: UniswapFlashQuery contract address
            timeout: HTTP request timeout in seconds
        """
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3UniswapQuery. Install with: pip install web3"
            ) from e

        self.w3 = Web3(Web3.HTTPProvider(web3_provider, request_kwargs={"timeout": timeout}))
        self.query = self.w3.eth.contract(
            address=Web3.to_checksum_address(query_address),
            abi=UNISWAP_QUERY_ABI,
        )

    def get_pairs_by_index_range(
        self,
        factory: str,
        start: int,
        stop: int,
    ) -> list[tuple[str, str, str]]:
        """Fetch (token0, token1, pair) rows for registry indices [start, stop)."""
        try:
            from web3 import Web3

            rows = self.query.functions.getPairsByIndexRange(
                Web3.to_checksum_address(factory), start, stop
            ).call()
        except Exception as e:
            logger.warning(
                "pairs_by_index_range_failed",
                factory=factory,
                start=start,
                stop=stop,
                error=str(e),
            )
            raise LookupUnavailable(f"getPairsByIndexRange failed: {e}", factory=factory) from e

        return [
            (normalize_address(token0), normalize_address(token1), normalize_address(pair))
            for token0, token1, pair in rows
        ]

    def get_reserves_by_pairs(self, pair_addresses: Sequence[str]) -> list[tuple[int, int, int]]:
        """Fetch (reserve0, reserve1, blockTimestampLast) per pair, in request order."""
        try:
            from web3 import Web3

            rows = self.query.functions.getReservesByPairs(
                [Web3.to_checksum_address(address) for address in pair_addresses]
            ).call()
        except Exception as e:
            logger.warning(
                "reserves_by_pairs_failed",
                pair_count=len(pair_addresses),
                error=str(e),
            )
            raise SyncUnavailable(f"getReservesByPairs failed: {e}") from e

        return [(int(row[0]), int(row[1]), int(row[2])) for row in rows]


__all__ = ["Web3UniswapQuery", "UNISWAP_QUERY_ABI"]
