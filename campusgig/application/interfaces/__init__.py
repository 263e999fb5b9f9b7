"""
Application interfaces package.
"""

from .repositories import (
    UNCHANGED,
    JobRepositoryInterface,
    JobSearchCriteria,
    NotificationRepositoryInterface,
    ProfileRepositoryInterface,
    RatingRepositoryInterface,
)
from .services import InvalidationTargetInterface

__all__ = [
    "UNCHANGED",
    "InvalidationTargetInterface",
    "JobRepositoryInterface",
    "JobSearchCriteria",
    "NotificationRepositoryInterface",
    "ProfileRepositoryInterface",
    "RatingRepositoryInterface",
]
