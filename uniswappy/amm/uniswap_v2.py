"""UniswapV2 style constant product market.

Covers Uniswap V2 and its forks (SushiSwap, etc.) that share the pair
contract: x * y = k with a 0.3% fee on input amounts.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from uniswappy.amm.base import CallDetails, Market, MultipleCallData
from uniswappy.amm.encoding import SwapEncoder, pair_swap_encoder
from uniswappy.amm.reserves import get_amount_in, get_amount_out
from uniswappy.constants import FEE_DENOMINATOR, FEE_NUMERATOR
from uniswappy.errors import InvalidAmount, InvalidReserve, UnsupportedToken
from uniswappy.models.types import normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class TokenBalances:
    """Reserves of a pair, always keyed by exactly its two tokens.

    Stored as an ordered pair rather than a dict so a partial or
    three-key state cannot be represented. Equality is by value.
    """

    token0: str
    token1: str
    balance0: int = 0
    balance1: int = 0

    @classmethod
    def from_ordered(cls, tokens: Sequence[str], balances: Sequence[int]) -> TokenBalances:
        """Zip two tokens with two balances in the same order.

        Raises:
            InvalidReserve: If balances is not two non-negative integers
        """
        if len(balances) != 2:
            raise InvalidReserve(f"Expected 2 ordered balances, got {len(balances)}")
        balance0, balance1 = (int(b) for b in balances)
        if balance0 < 0 or balance1 < 0:
            raise InvalidReserve(f"Balances cannot be negative: {balance0}, {balance1}")
        return cls(tokens[0], tokens[1], balance0, balance1)

    def get(self, token: str) -> int | None:
        """Balance of `token`, or None if it is not one of the two tokens."""
        if token == self.token0:
            return self.balance0
        if token == self.token1:
            return self.balance1
        return None

    def __contains__(self, token: object) -> bool:
        return token == self.token0 or token == self.token1

    def as_dict(self) -> dict[str, int]:
        return {self.token0: self.balance0, self.token1: self.balance1}


class UniswapV2Pair(Market):
    """A UniswapV2 pair trading two tokens.

    Reserves start at zero and are only replaced wholesale through
    set_reserves / set_reserves_by_token. Pricing reads them through
    uniswappy.amm.reserves; calldata goes through a SwapEncoder.
    """

    def __init__(
        self,
        address: str,
        tokens: Sequence[str],
        protocol: str = "",
        *,
        encoder: SwapEncoder | None = None,
        fee_numerator: int = FEE_NUMERATOR,
        fee_denominator: int = FEE_DENOMINATOR,
    ) -> None:
        """Initialize a pair with zero reserves.

        Args:
            address: Pair contract address
            tokens: (token0, token1) in the pair's on-chain order
            protocol: Free-form dialect tag, e.g. the factory name
            encoder: Calldata encoder (default: eth-abi PairSwapEncoder)
            fee_numerator: Fee multiplier numerator (default 997)
            fee_denominator: Fee multiplier denominator (default 1000)
        """
        super().__init__(address, tokens, protocol)
        self._balances = TokenBalances(self.tokens[0], self.tokens[1])
        self._encoder = encoder if encoder is not None else pair_swap_encoder
        self.fee_numerator = fee_numerator
        self.fee_denominator = fee_denominator

    @property
    def balances(self) -> TokenBalances:
        """Current reserves as an immutable token/balance pair."""
        return self._balances

    @property
    def reserves(self) -> dict[str, int]:
        """Current reserves keyed by token (a fresh dict on every access)."""
        return self._balances.as_dict()

    def _reserve(self, token: str) -> int:
        balance = self._balances.get(normalize_address(token))
        if balance is None:
            raise UnsupportedToken(f"Market {self.address} does not operate on token {token}")
        return balance

    def _reserves_for(self, token_in: str, token_out: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        if normalize_address(token_in) == normalize_address(token_out):
            raise UnsupportedToken(f"Cannot swap {token_in} for itself in {self.address}")
        return self._reserve(token_in), self._reserve(token_out)

    def receive_directly(self, token: str) -> bool:
        return normalize_address(token) in self._balances

    def prepare_receive(self, token: str, amount_in: int) -> list[CallDetails]:
        if not self.receive_directly(token):
            raise UnsupportedToken(f"Market {self.address} does not operate on token {token}")
        if amount_in <= 0:
            raise InvalidAmount(f"Invalid amount: {amount_in}")
        # Pairs are paid by plain transfer; nothing to set up
        return []

    def get_balance(self, token: str) -> int:
        return self._reserve(token)

    def set_reserves(self, ordered_balances: Sequence[int]) -> bool:
        """Replace reserves from (balance0, balance1).

        Args:
            ordered_balances: Balances ordered like `tokens`

        Returns:
            True if reserves changed, False if they were already equal

        Raises:
            InvalidReserve: If balances are malformed (state is left untouched)
        """
        balances = TokenBalances.from_ordered(self.tokens, ordered_balances)
        if balances == self._balances:
            return False
        self._balances = balances
        return True

    def set_reserves_by_token(self, tokens: Sequence[str], balances: Sequence[int]) -> bool:
        """Replace reserves from balances matched to an arbitrary token order.

        Args:
            tokens: The pair's two tokens, in any order
            balances: Balances matching `tokens` position by position

        Returns:
            True if reserves changed, False if they were already equal

        Raises:
            UnsupportedToken: If tokens are not exactly this pair's tokens
            InvalidReserve: If balances are malformed
        """
        if len(tokens) != 2 or len(balances) != 2:
            raise InvalidReserve(
                f"Expected 2 tokens and 2 balances, got {len(tokens)} and {len(balances)}"
            )
        matched = dict(zip((normalize_address(t) for t in tokens), balances, strict=True))
        if set(matched) != set(self.tokens):
            raise UnsupportedToken(
                f"Tokens {list(tokens)} do not match market {self.address} tokens {list(self.tokens)}"
            )
        return self.set_reserves([matched[self.tokens[0]], matched[self.tokens[1]]])

    def get_tokens_out(self, token_in: str, token_out: str, amount_in: int) -> int:
        reserve_in, reserve_out = self._reserves_for(token_in, token_out)
        return get_amount_out(
            reserve_in, reserve_out, amount_in, self.fee_numerator, self.fee_denominator
        )

    def get_tokens_in(self, token_in: str, token_out: str, amount_out: int) -> int:
        reserve_in, reserve_out = self._reserves_for(token_in, token_out)
        return get_amount_in(
            reserve_in, reserve_out, amount_out, self.fee_numerator, self.fee_denominator
        )

    def build_swap_call_data(self, token_in: str, amount_in: int, recipient: str) -> str:
        """Encode pair.swap() for selling `amount_in` of `token_in`.

        Selling token0 fills amount1Out and vice versa; the other slot is 0.

        Raises:
            UnsupportedToken: If token_in is not in this pair
        """
        token0, token1 = self.tokens
        token_in_norm = normalize_address(token_in)
        amount0_out = 0
        amount1_out = 0
        if token_in_norm == token0:
            amount1_out = self.get_tokens_out(token0, token1, amount_in)
        elif token_in_norm == token1:
            amount0_out = self.get_tokens_out(token1, token0, amount_in)
        else:
            raise UnsupportedToken(f"Bad token input address {token_in} for market {self.address}")

        return self._encoder.encode_swap(amount0_out, amount1_out, recipient, b"")

    def build_hop_call_data(
        self,
        token_in: str,
        amount_in: int,
        next_market: Market,
    ) -> MultipleCallData:
        """Swap on this pair and send the output straight to `next_market`."""
        token_out = self.other_token(token_in)
        if not next_market.receive_directly(token_out):
            # TODO: route through an intermediary once a dialect that cannot
            # receive token_out by plain transfer exists
            logger.debug(
                "hop_recipient_cannot_receive_directly",
                market=self.address,
                next_market=next_market.address,
                token_out=token_out,
            )

        exchange_call = self.build_swap_call_data(token_in, amount_in, next_market.address)
        return MultipleCallData(targets=[self.address], data=[exchange_call])


__all__ = ["TokenBalances", "UniswapV2Pair"]
