"""
Domain entities package.
"""

from .job import Job
from .notification import Notification
from .profile import Profile
from .rating import Rating

__all__ = [
    "Job",
    "Notification",
    "Profile",
    "Rating",
]
