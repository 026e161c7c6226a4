"""Pair contract calldata encoding for UniswapV2 swaps."""

from __future__ import annotations

from typing import Protocol

from eth_abi import encode  # type: ignore[attr-defined]

from uniswappy.models.types import is_valid_address
from uniswappy.safe_int import S

# swap(uint256,uint256,address,bytes)
PAIR_SWAP_SELECTOR = bytes.fromhex("022c0d9f")


class SwapEncoder(Protocol):
    """Turns a structured swap intent into opaque pair calldata.

    Markets depend on this protocol rather than on eth-abi directly, so
    tests can inject a recording encoder.
    """

    def encode_swap(
        self,
        amount0_out: int,
        amount1_out: int,
        recipient: str,
        data: bytes,
    ) -> str:
        """Encode a pair swap call.

        Args:
            amount0_out: Amount of token0 sent to recipient
            amount1_out: Amount of token1 sent to recipient
            recipient: Address receiving the output
            data: Callback data (empty for plain swaps)

        Returns:
            0x-prefixed hex calldata
        """
        ...


def encode_pair_swap(
    amount0_out: int,
    amount1_out: int,
    recipient: str,
    data: bytes = b"",
) -> str:
    """Encode UniswapV2Pair.swap(amount0Out, amount1Out, to, data).

    Args:
        amount0_out: Amount of token0 to send out
        amount1_out: Amount of token1 to send out
        recipient: Address receiving the output (0x-prefixed hex)
        data: Flash-swap callback data, empty for a plain swap

    Returns:
        0x-prefixed hex calldata

    Raises:
        ValueError: If recipient is not a valid address
        Uint256Overflow: If an amount is negative or exceeds uint256
    """
    if not is_valid_address(recipient):
        raise ValueError(f"Invalid recipient address: {recipient}")

    recipient_bytes = bytes.fromhex(recipient[2:])
    encoded_args = encode(
        ["uint256", "uint256", "address", "bytes"],
        [S(amount0_out).to_uint256(), S(amount1_out).to_uint256(), recipient_bytes, data],
    )

    return "0x" + (PAIR_SWAP_SELECTOR + encoded_args).hex()


class PairSwapEncoder:
    """Default SwapEncoder backed by eth-abi."""

    def encode_swap(
        self,
        amount0_out: int,
        amount1_out: int,
        recipient: str,
        data: bytes,
    ) -> str:
        return encode_pair_swap(amount0_out, amount1_out, recipient, data)


# Singleton instance
pair_swap_encoder = PairSwapEncoder()


__all__ = [
    "PAIR_SWAP_SELECTOR",
    "SwapEncoder",
    "PairSwapEncoder",
    "pair_swap_encoder",
    "encode_pair_swap",
]
