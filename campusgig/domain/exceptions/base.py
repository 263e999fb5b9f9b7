"""
Base class for marketplace domain exceptions.
"""


class MarketplaceError(Exception):
    """Base exception for all typed marketplace errors."""

    error_type = "marketplace_error"
    retryable = False

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)

    @classmethod
    def from_message(cls, message: str) -> "MarketplaceError":
        """Rebuild an error received over the wire from its message alone."""
        error = cls.__new__(cls)
        MarketplaceError.__init__(error, message)
        return error
