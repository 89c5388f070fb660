"""Domain error hierarchy.

Source, metadata, upstream and persistence errors are contained by the
portfolio sync and turned into degraded results. Only InvalidRequestError is
meant to reach callers.
"""


class PortfolioError(RuntimeError):
    """Base class for portfolio errors."""


class SourceUnavailableError(PortfolioError):
    """An exchange or chain balance source failed."""


class MetadataUnavailableError(PortfolioError):
    """Token metadata could not be retrieved."""


class UpstreamUnavailableError(PortfolioError):
    """The market data provider failed or timed out."""


class PersistenceError(PortfolioError):
    """A store read or write failed."""


class InvalidRequestError(PortfolioError):
    """Caller input is malformed."""


__all__ = [
    "PortfolioError",
    "SourceUnavailableError",
    "MetadataUnavailableError",
    "UpstreamUnavailableError",
    "PersistenceError",
    "InvalidRequestError",
]
