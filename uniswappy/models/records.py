"""Pydantic models for discovered pair metadata."""

from pydantic import BaseModel, Field

from uniswappy.models.types import Address


class PairRecord(BaseModel):
    """A discovered pair, as handed to the pair store.

    Only the existence of a record for `market_address` matters to
    discovery; the remaining fields are bookkeeping for the store.
    """

    market_address: Address = Field(alias="marketAddress", description="Pair contract address.")
    token0: Address = Field(description="First token in on-chain order.")
    token1: Address = Field(description="Second token in on-chain order.")
    factory_address: Address = Field(
        alias="factoryAddress",
        description="Factory whose registry listed the pair.",
    )

    model_config = {"populate_by_name": True, "frozen": True}
