"""FastAPI application serving the market graph.

On startup, if UNISWAPPY_RPC_URL is set, the graph is bootstrapped from the
ledger in a worker thread. Otherwise the app starts with an empty graph.
"""

import asyncio
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import Depends, FastAPI

from uniswappy import __version__
from uniswappy.api.endpoints import MarketState, get_market_state, router
from uniswappy.config import MarketConfig
from uniswappy.constants import FACTORY_ADDRESSES
from uniswappy.discovery.engine import discover_all_markets
from uniswappy.discovery.stores import InMemoryPairStore, JsonFilePairStore

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("UNISWAPPY_HOST", "0.0.0.0")
PORT = int(os.environ.get("UNISWAPPY_PORT", "8000"))
DEBUG = os.environ.get("UNISWAPPY_DEBUG", "false").lower() in ("true", "1", "yes")
RPC_URL = os.environ.get("UNISWAPPY_RPC_URL")
PAIR_STORE_PATH = os.environ.get("UNISWAPPY_PAIR_STORE")
FACTORIES = [
    f.strip()
    for f in os.environ.get("UNISWAPPY_FACTORIES", ",".join(FACTORY_ADDRESSES.values())).split(",")
    if f.strip()
]


def bootstrap_market_state(state: MarketState, rpc_url: str) -> None:
    """Discover markets from the ledger and install them into `state`."""
    from uniswappy.adapters.web3_query import Web3UniswapQuery

    config = MarketConfig.from_env()
    store = JsonFilePairStore(PAIR_STORE_PATH) if PAIR_STORE_PATH else InMemoryPairStore()
    grouped = discover_all_markets(Web3UniswapQuery(rpc_url), store, FACTORIES, config=config)
    state.replace(grouped, pivot=config.pivot_token)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    if RPC_URL:
        try:
            await asyncio.to_thread(bootstrap_market_state, get_market_state(), RPC_URL)
        except Exception:
            # Serve an empty graph rather than refusing to start
            logger.exception("market_bootstrap_failed")
    else:
        logger.info("market_bootstrap_skipped", reason="UNISWAPPY_RPC_URL not set")
    yield


app = FastAPI(
    title="Uniswappy markets",
    description="Constant product market graph, pricing and swap calldata",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/health")
async def health(state: MarketState = Depends(get_market_state)) -> dict[str, object]:
    """Health check endpoint."""
    grouped = state.grouped
    return {
        "status": "ok",
        "tokens": grouped.token_count,
        "markets": grouped.market_count,
        "failed_factories": sorted(grouped.failed_factories),
    }


def run() -> None:
    """Run the market API server.

    Configuration via environment variables:
    - UNISWAPPY_HOST: Host to bind to (default: 0.0.0.0)
    - UNISWAPPY_PORT: Port to bind to (default: 8000)
    - UNISWAPPY_DEBUG: Enable debug/reload mode (default: false)
    - UNISWAPPY_RPC_URL: RPC endpoint used to bootstrap the graph
    - UNISWAPPY_PAIR_STORE: JSON lines file for discovered pair records
    - UNISWAPPY_FACTORIES: Comma-separated factory addresses
    """
    uvicorn.run(
        "uniswappy.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
