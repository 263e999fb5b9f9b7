"""
Database repositories package.
"""

from .job_repository import JobRepository
from .notification_repository import NotificationRepository
from .profile_repository import ProfileRepository
from .rating_repository import RatingRepository

__all__ = [
    "JobRepository",
    "NotificationRepository",
    "ProfileRepository",
    "RatingRepository",
]
