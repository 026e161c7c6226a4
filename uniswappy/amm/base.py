"""Base classes for market implementations.

A Market is one on-chain pool holding exactly two tokens. The constant
product pair (uniswappy.amm.uniswap_v2) is the only dialect implemented;
other dialects subclass Market and slot into discovery and graph building
unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

from uniswappy.errors import MalformedMarket, UnsupportedToken
from uniswappy.models.types import is_valid_address, normalize_address


@dataclass(frozen=True)
class CallDetails:
    """A single call that must run before a market can receive funds."""

    target: str
    data: str
    value: int = 0


@dataclass(frozen=True)
class MultipleCallData:
    """Parallel lists of call targets and calldata for one hop."""

    targets: list[str] = field(default_factory=list)
    data: list[str] = field(default_factory=list)


class Market(ABC):
    """Abstract base class for two-token markets.

    Subclasses provide pricing, reserve state and call construction.
    Identity (address, token order, protocol tag) is fixed at construction.
    """

    def __init__(self, address: str, tokens: Sequence[str], protocol: str = "") -> None:
        """Initialize market identity.

        Args:
            address: Pool contract address
            tokens: Exactly two distinct token addresses, in on-chain order
            protocol: Free-form AMM dialect tag

        Raises:
            MalformedMarket: If the address or token pair is invalid
        """
        if not is_valid_address(normalize_address(address)):
            raise MalformedMarket(f"Invalid market address: {address}")
        if len(tokens) != 2:
            raise MalformedMarket(f"Market {address} needs exactly 2 tokens, got {len(tokens)}")

        token0 = normalize_address(tokens[0])
        token1 = normalize_address(tokens[1])
        if token0 == token1:
            raise MalformedMarket(f"Market {address} lists {token0} on both sides")

        self._address = normalize_address(address)
        self._tokens = (token0, token1)
        self._protocol = protocol

    @property
    def address(self) -> str:
        """Pool contract address (lowercase)."""
        return self._address

    @property
    def tokens(self) -> tuple[str, str]:
        """The two tokens in on-chain order."""
        return self._tokens

    @property
    def protocol(self) -> str:
        """AMM dialect tag."""
        return self._protocol

    def other_token(self, token: str) -> str:
        """Return the token on the opposite side of `token`.

        Raises:
            UnsupportedToken: If token is not in this market
        """
        token_norm = normalize_address(token)
        if token_norm == self._tokens[0]:
            return self._tokens[1]
        if token_norm == self._tokens[1]:
            return self._tokens[0]
        raise UnsupportedToken(f"Market {self._address} does not operate on token {token}")

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(address={self._address!r}, tokens={self._tokens!r}, "
            f"protocol={self._protocol!r})"
        )

    @abstractmethod
    def receive_directly(self, token: str) -> bool:
        """Whether an upstream hop can send `token` straight to this market."""
        ...

    @abstractmethod
    def prepare_receive(self, token: str, amount_in: int) -> list[CallDetails]:
        """Calls needed before this market can receive `amount_in` of `token`.

        Raises:
            UnsupportedToken: If token is not in this market
            InvalidAmount: If amount_in is not positive
        """
        ...

    @abstractmethod
    def get_balance(self, token: str) -> int:
        """Current reserve of `token`."""
        ...

    @abstractmethod
    def set_reserves(self, ordered_balances: Sequence[int]) -> bool:
        """Replace reserves from balances ordered like `tokens`.

        Returns:
            True if the reserves changed, False if the update was a no-op
        """
        ...

    @abstractmethod
    def get_tokens_out(self, token_in: str, token_out: str, amount_in: int) -> int:
        """Output amount for an exact input against current reserves."""
        ...

    @abstractmethod
    def get_tokens_in(self, token_in: str, token_out: str, amount_out: int) -> int:
        """Input amount required for an exact output against current reserves."""
        ...

    @abstractmethod
    def build_swap_call_data(self, token_in: str, amount_in: int, recipient: str) -> str:
        """Calldata swapping `amount_in` of `token_in`, output sent to `recipient`."""
        ...

    @abstractmethod
    def build_hop_call_data(
        self,
        token_in: str,
        amount_in: int,
        next_market: Market,
    ) -> MultipleCallData:
        """Calls for one hop whose output feeds `next_market`."""
        ...
