"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token, factory and pair addresses
- factories: Market and registry row factory functions
"""

from tests.helpers.constants import (
    BAD_TOKEN,
    DAI,
    ETHER,
    EXECUTOR,
    LINK,
    SUSHISWAP_FACTORY,
    UNI,
    UNISWAP_FACTORY,
    USDC,
    WETH,
    addr,
)
from tests.helpers.factories import make_filler_registry, make_pair, make_registry

__all__ = [
    # Constants
    "WETH",
    "DAI",
    "USDC",
    "UNI",
    "LINK",
    "BAD_TOKEN",
    "UNISWAP_FACTORY",
    "SUSHISWAP_FACTORY",
    "EXECUTOR",
    "ETHER",
    "addr",
    # Factories
    "make_pair",
    "make_registry",
    "make_filler_registry",
]
