"""API endpoints exposing the market graph."""

import threading

import structlog
from fastapi import APIRouter, Depends, HTTPException

from uniswappy.amm.base import Market
from uniswappy.config import DEFAULT_CONFIG
from uniswappy.discovery.graph import GroupedMarkets
from uniswappy.errors import MarketError
from uniswappy.models.api import (
    MarketGraphResponse,
    MarketView,
    QuoteKind,
    QuoteRequest,
    QuoteResponse,
    SwapCallRequest,
    SwapCallResponse,
    TokenMarkets,
)
from uniswappy.models.types import normalize_address

logger = structlog.get_logger()

router = APIRouter()


class MarketState:
    """Process-wide holder of the current market graph.

    The graph is swapped as a whole by replace(); readers always see either
    the old or the new graph.
    """

    def __init__(self, grouped: GroupedMarkets | None = None, pivot: str | None = None) -> None:
        self._lock = threading.Lock()
        self.pivot = normalize_address(pivot or DEFAULT_CONFIG.pivot_token)
        self._grouped = GroupedMarkets()
        self._by_address: dict[str, Market] = {}
        if grouped is not None:
            self.replace(grouped)

    def replace(self, grouped: GroupedMarkets, pivot: str | None = None) -> None:
        by_address = {
            market.address: market
            for markets in grouped.markets_by_token.values()
            for market in markets
        }
        with self._lock:
            self._grouped = grouped
            self._by_address = by_address
            if pivot is not None:
                self.pivot = normalize_address(pivot)

    @property
    def grouped(self) -> GroupedMarkets:
        with self._lock:
            return self._grouped

    def get_market(self, address: str) -> Market | None:
        with self._lock:
            return self._by_address.get(normalize_address(address))


_market_state = MarketState()


def get_market_state() -> MarketState:
    """Dependency provider for the market state.

    Override this in tests to inject a prepared graph:
        app.dependency_overrides[get_market_state] = lambda: state
    """
    return _market_state


def _require_market(state: MarketState, address: str) -> Market:
    market = state.get_market(address)
    if market is None:
        raise HTTPException(status_code=404, detail=f"Unknown market {address}")
    return market


def _token_markets(token: str, markets: list[Market]) -> TokenMarkets:
    return TokenMarkets(token=token, markets=[MarketView.from_market(m) for m in markets])


@router.get("/markets")
async def list_markets(state: MarketState = Depends(get_market_state)) -> MarketGraphResponse:
    """Return the full market graph grouped by non-pivot token."""
    grouped = state.grouped
    return MarketGraphResponse(
        pivot=state.pivot,
        token_count=grouped.token_count,
        market_count=grouped.market_count,
        tokens=[_token_markets(t, ms) for t, ms in grouped.markets_by_token.items()],
    )


@router.get("/markets/{token}")
async def token_markets(
    token: str,
    state: MarketState = Depends(get_market_state),
) -> TokenMarkets:
    """Return the markets trading one token against the pivot."""
    token_norm = normalize_address(token)
    markets = state.grouped.markets_by_token.get(token_norm)
    if markets is None:
        raise HTTPException(status_code=404, detail=f"No markets for token {token}")
    return _token_markets(token_norm, markets)


@router.post("/quote")
async def quote(
    request: QuoteRequest,
    state: MarketState = Depends(get_market_state),
) -> QuoteResponse:
    """Price a swap against current reserves.

    Error Handling:
        - Unknown market: 404
        - Unsupported token, empty reserves, insufficient liquidity: 400
    """
    market = _require_market(state, request.market)
    amount = int(request.amount)
    try:
        if request.kind == QuoteKind.SELL:
            amount_in = amount
            amount_out = market.get_tokens_out(request.token_in, request.token_out, amount)
        else:
            amount_out = amount
            amount_in = market.get_tokens_in(request.token_in, request.token_out, amount)
    except MarketError as e:
        logger.info("quote_rejected", market=market.address, error_type=type(e).__name__)
        raise HTTPException(status_code=400, detail=str(e)) from e

    return QuoteResponse(
        market=market.address,
        token_in=request.token_in,
        token_out=request.token_out,
        amount_in=str(amount_in),
        amount_out=str(amount_out),
    )


@router.post("/calldata")
async def swap_calldata(
    request: SwapCallRequest,
    state: MarketState = Depends(get_market_state),
) -> SwapCallResponse:
    """Build pair.swap() calldata selling `amountIn` of `tokenIn` to `recipient`."""
    market = _require_market(state, request.market)
    try:
        calldata = market.build_swap_call_data(
            request.token_in, int(request.amount_in), request.recipient
        )
    except MarketError as e:
        logger.info("calldata_rejected", market=market.address, error_type=type(e).__name__)
        raise HTTPException(status_code=400, detail=str(e)) from e

    return SwapCallResponse(target=market.address, calldata=calldata)
