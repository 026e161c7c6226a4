"""Error classes for market pricing, discovery and sync.

None of these are retried inside the package. A caller seeing one should
treat the affected market or factory as currently unusable.
"""


class MarketError(Exception):
    """Base error for market operations."""

    pass


class InvalidReserve(MarketError):
    """A reserve is zero or negative where the formula divides by it."""

    pass


class InsufficientLiquidity(MarketError):
    """Requested output is not strictly below the output reserve."""

    pass


class UnsupportedToken(MarketError):
    """Token is not one of the market's two tokens."""

    pass


class InvalidAmount(MarketError):
    """Swap amount is outside the accepted range."""

    pass


class MalformedMarket(MarketError):
    """Market or raw pair does not have the expected shape."""

    pass


class LookupUnavailable(MarketError):
    """The pair lookup capability failed while paging a factory registry."""

    def __init__(self, message: str, factory: str | None = None) -> None:
        super().__init__(message)
        self.factory = factory


class SyncUnavailable(MarketError):
    """The batched reserve query failed or returned an unusable response."""

    pass
