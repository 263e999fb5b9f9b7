"""
Service interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod


class InvalidationTargetInterface(ABC):
    """Anything holding cached reads that mutations can mark stale."""

    @abstractmethod
    def invalidate(self, *patterns: str) -> int:
        """Mark keys matching any of the glob patterns stale.

        Returns the number of keys affected.
        """
        pass
