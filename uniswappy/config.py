"""Configuration for market discovery and filtering."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from uniswappy.constants import (
    BATCH_COUNT_LIMIT,
    DEFAULT_LIQUIDITY_FLOOR,
    DENYLIST_TOKENS,
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    UNISWAP_BATCH_SIZE,
    WETH,
)
from uniswappy.models.types import normalize_address

ENV_PREFIX = "UNISWAPPY_"


@dataclass(frozen=True)
class MarketConfig:
    """Centralized configuration for discovery, sync and filtering.

    Nothing in the core reads the environment; build one with
    `MarketConfig.from_env()` at the edges (API, scripts) and pass it in.

    Attributes:
        pivot_token: Asset every market must contain (default: WETH)
        batch_size: Pairs requested per registry page (default: 1000)
        batch_count_limit: Maximum pages fetched per factory (default: 100)
        liquidity_floor: Pivot-side reserve a market must exceed, in wei
            (default: 5 ETH)
        fee_numerator: Fee multiplier numerator (default: 997)
        fee_denominator: Fee multiplier denominator (default: 1000)
        denylist: Non-pivot tokens skipped during discovery
        max_workers: Threads used for factory fan-out. None means one per factory.
    """

    pivot_token: str = WETH
    batch_size: int = UNISWAP_BATCH_SIZE
    batch_count_limit: int = BATCH_COUNT_LIMIT
    liquidity_floor: int = DEFAULT_LIQUIDITY_FLOOR
    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    denylist: frozenset[str] = field(default=DENYLIST_TOKENS)
    max_workers: int | None = None

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.batch_count_limit <= 0:
            raise ValueError(f"batch_count_limit must be positive, got {self.batch_count_limit}")
        if self.liquidity_floor < 0:
            raise ValueError(f"liquidity_floor cannot be negative, got {self.liquidity_floor}")
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"Invalid fee ratio {self.fee_numerator}/{self.fee_denominator} "
                "(need 0 < numerator <= denominator)"
            )
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")

        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "pivot_token", normalize_address(self.pivot_token, validate=True))
        object.__setattr__(
            self,
            "denylist",
            frozenset(normalize_address(token, validate=True) for token in self.denylist),
        )

    def is_denylisted(self, token: str) -> bool:
        """Check whether a token is excluded from discovery."""
        return normalize_address(token) in self.denylist

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MarketConfig:
        """Build a config from UNISWAPPY_* environment variables.

        Recognized variables (all optional):
        - UNISWAPPY_PIVOT_TOKEN
        - UNISWAPPY_BATCH_SIZE
        - UNISWAPPY_BATCH_COUNT_LIMIT
        - UNISWAPPY_LIQUIDITY_FLOOR (wei)
        - UNISWAPPY_DENYLIST (comma-separated, replaces the default list)
        - UNISWAPPY_MAX_WORKERS

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Raises:
            ValueError: If a variable cannot be parsed or fails validation
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}

        pivot = env.get(f"{ENV_PREFIX}PIVOT_TOKEN")
        if pivot:
            overrides["pivot_token"] = pivot

        for name in ("batch_size", "batch_count_limit", "liquidity_floor", "max_workers"):
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw:
                try:
                    overrides[name] = int(raw)
                except ValueError as err:
                    raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an integer: {raw!r}") from err

        denylist = env.get(f"{ENV_PREFIX}DENYLIST")
        if denylist is not None:
            overrides["denylist"] = frozenset(
                token.strip() for token in denylist.split(",") if token.strip()
            )

        return cls(**overrides)  # type: ignore[arg-type]


# Default configuration instance
DEFAULT_CONFIG = MarketConfig()
