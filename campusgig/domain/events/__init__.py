"""
Domain events package.
"""

from .job_deleted import JobDeleted
from .job_status_changed import JobStatusChanged
from .notification_read import NotificationsRead
from .rating_recorded import RatingRecorded

__all__ = [
    "JobDeleted",
    "JobStatusChanged",
    "NotificationsRead",
    "RatingRecorded",
]
