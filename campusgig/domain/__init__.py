"""
Domain package.
"""

from .entities import *
from .events import *
from .exceptions import *
from .value_objects import *

__all__ = [
    # Entities
    "Job",
    "Notification",
    "Profile",
    "Rating",
    # Events
    "JobStatusChanged",
    "NotificationsRead",
    "RatingRecorded",
    # Exceptions
    "AlreadyAssignedError",
    "DuplicateRatingError",
    "InvalidTransitionError",
    "MarketplaceError",
    "NetworkError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationError",
    # Value Objects
    "JobSort",
    "JobStatus",
    "NotificationType",
    "RatingType",
]
