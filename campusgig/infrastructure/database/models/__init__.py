"""
Database models package.
"""

from .base import Base, BaseModel
from .job import JobModel
from .notification import NotificationModel
from .profile import ProfileModel
from .rating import RatingModel

__all__ = [
    "Base",
    "BaseModel",
    "JobModel",
    "NotificationModel",
    "ProfileModel",
    "RatingModel",
]
