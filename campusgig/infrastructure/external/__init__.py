"""
External service clients.
"""

from .marketplace_client import MarketplaceClient, error_from_response

__all__ = ["MarketplaceClient", "error_from_response"]
