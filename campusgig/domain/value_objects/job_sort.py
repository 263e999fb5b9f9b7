"""
Job search sort order value object.
"""

from enum import Enum

URGENCY_RANK = {
    "ASAP": 1,
    "Today": 2,
    "3 days": 3,
    "This week": 4,
}
DEFAULT_URGENCY_RANK = 5


class JobSort(str, Enum):
    """Sort orders supported by job search."""

    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    URGENCY = "urgency"


def urgency_rank(urgency: str) -> int:
    """Rank an urgency label; unknown labels sort last."""
    return URGENCY_RANK.get(urgency, DEFAULT_URGENCY_RANK)
