"""
Authorization and lookup domain exceptions.
"""

from .base import MarketplaceError


class UnauthorizedError(MarketplaceError):
    """Raised when the caller is not the authorized party for a mutation."""

    error_type = "unauthorized"


class NotFoundError(MarketplaceError):
    """Raised when a referenced resource does not exist."""

    error_type = "not_found"

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource.capitalize()} {resource_id} not found")
