"""Protocol constants for Uniswap V2 style markets.

Centralizes well-known addresses and protocol parameters.
"""

from uniswappy.models.types import is_valid_address, normalize_address


def _validate_address(name: str, address: str) -> str:
    """Validate an address and return it lowercased.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return normalize_address(address)


ETHER = 10**18

# Wrapped Ether on mainnet, the default pivot asset
WETH = _validate_address("WETH", "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2")

# UniswapFlashQuery helper contract (getPairsByIndexRange / getReservesByPairs)
UNISWAP_LOOKUP_CONTRACT_ADDRESS = _validate_address(
    "UniswapFlashQuery", "0x5EF1009b9FCD4fec3094a5564047e190D72Bd511"
)

# Uniswap V2 forks whose factories share the same pair contract
FACTORY_ADDRESSES = {
    "uniswap_v2": _validate_address("uniswap_v2", "0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f"),
    "sushiswap": _validate_address("sushiswap", "0xC0AEe478e3658e2610c5F7A4A2E1777cE9e4f2Ac"),
    "crypto_com": _validate_address("crypto_com", "0x9DEB29c9a4c7A88a3C0257393b7f3335338D9A9D"),
    "zeus": _validate_address("zeus", "0x1e895bFe59E3A5103e8B7dA3897d1F2391476f3c"),
    "luaswap": _validate_address("luaswap", "0x696708Db871B77355d6C2bE7290B27CF0Bb9B24b"),
}

# Pagination against the factory registry
UNISWAP_BATCH_SIZE = 1000
# Loading every pair of a large factory takes a long time; cap the page count
BATCH_COUNT_LIMIT = 100

# 0.3% swap fee as an exact ratio
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Minimum pivot-side reserve for a market to be worth arbitraging
DEFAULT_LIQUIDITY_FLOOR = 5 * ETHER

# Tokens known to break or waste time in simulation
DENYLIST_TOKENS = frozenset(
    _validate_address("denylisted token", address)
    for address in (
        "0xD75EA151a61d06868E31F8988D28DFE5E9df57B4",
        "0x0000000000095413afC295d19EDeb1Ad7B71c952",
        "0x9EA3b5b4EC044b70375236A281986106457b20EF",
        "0x15874d65e649880c2614e7a480cb7c9a55787ff6",
    )
)


def protocol_for_factory(factory_address: str) -> str:
    """Return the known protocol name for a factory, or "" if unknown."""
    factory = normalize_address(factory_address)
    for name, address in FACTORY_ADDRESSES.items():
        if address == factory:
            return name
    return ""
