"""
Transport-level exceptions.
"""

from .base import MarketplaceError


class NetworkError(MarketplaceError):
    """Raised when the backend could not be reached.

    Reads absorb it in the sync layer; writes surface it to the caller and
    are never retried automatically.
    """

    error_type = "network_error"
    retryable = True
