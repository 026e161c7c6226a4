"""Market implementations and constant product math."""

from uniswappy.amm.base import CallDetails, Market, MultipleCallData
from uniswappy.amm.encoding import (
    PAIR_SWAP_SELECTOR,
    PairSwapEncoder,
    SwapEncoder,
    encode_pair_swap,
    pair_swap_encoder,
)
from uniswappy.amm.reserves import get_amount_in, get_amount_out
from uniswappy.amm.uniswap_v2 import TokenBalances, UniswapV2Pair

__all__ = [
    # Base classes
    "Market",
    "CallDetails",
    "MultipleCallData",
    # Reserve arithmetic
    "get_amount_out",
    "get_amount_in",
    # UniswapV2
    "UniswapV2Pair",
    "TokenBalances",
    # Encoding
    "PAIR_SWAP_SELECTOR",
    "SwapEncoder",
    "PairSwapEncoder",
    "pair_swap_encoder",
    "encode_pair_swap",
]
