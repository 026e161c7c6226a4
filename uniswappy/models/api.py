"""Pydantic request/response models for the market API."""

from enum import Enum

from pydantic import BaseModel, Field

from uniswappy.amm.base import Market
from uniswappy.models.types import Address, Bytes, Uint256


class MarketView(BaseModel):
    """A market with its current reserves."""

    address: Address
    tokens: list[Address]
    protocol: str = ""
    reserves: dict[str, Uint256] = Field(
        default_factory=dict,
        description="Token address -> reserve as decimal string.",
    )

    @classmethod
    def from_market(cls, market: Market) -> "MarketView":
        reserves = {token: str(market.get_balance(token)) for token in market.tokens}
        return cls(
            address=market.address,
            tokens=list(market.tokens),
            protocol=market.protocol,
            reserves=reserves,
        )


class TokenMarkets(BaseModel):
    """All markets trading one token against the pivot."""

    token: Address
    markets: list[MarketView]


class MarketGraphResponse(BaseModel):
    """The full market graph."""

    pivot: Address
    token_count: int = Field(alias="tokenCount")
    market_count: int = Field(alias="marketCount")
    tokens: list[TokenMarkets]

    model_config = {"populate_by_name": True}


class QuoteKind(str, Enum):
    """Which side of the quote is fixed."""

    SELL = "sell"  # exact input, quote the output
    BUY = "buy"  # exact output, quote the input


class QuoteRequest(BaseModel):
    """Price a hypothetical swap against one market."""

    market: Address
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount: Uint256 = Field(description="Input amount for sell, output amount for buy.")
    kind: QuoteKind = QuoteKind.SELL

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    market: Address
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class SwapCallRequest(BaseModel):
    """Build pair.swap() calldata for selling into one market."""

    market: Address
    token_in: Address = Field(alias="tokenIn")
    amount_in: Uint256 = Field(alias="amountIn")
    recipient: Address

    model_config = {"populate_by_name": True}


class SwapCallResponse(BaseModel):
    target: Address
    calldata: Bytes


__all__ = [
    "MarketView",
    "TokenMarkets",
    "MarketGraphResponse",
    "QuoteKind",
    "QuoteRequest",
    "QuoteResponse",
    "SwapCallRequest",
    "SwapCallResponse",
]
