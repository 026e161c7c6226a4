"""Data models for pair records and address types."""

from uniswappy.models.records import PairRecord
from uniswappy.models.types import (
    UINT256_MAX,
    Address,
    Bytes,
    Uint256,
    is_valid_address,
    normalize_address,
)

__all__ = [
    "PairRecord",
    "Address",
    "Bytes",
    "Uint256",
    "UINT256_MAX",
    "is_valid_address",
    "normalize_address",
]
