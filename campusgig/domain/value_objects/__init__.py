"""
Domain value objects package.
"""

from .job_sort import JobSort, urgency_rank
from .job_status import JobStatus
from .notification_type import NotificationType
from .rating_type import RatingType

__all__ = [
    "JobSort",
    "JobStatus",
    "NotificationType",
    "RatingType",
    "urgency_rank",
]
