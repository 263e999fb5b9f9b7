"""
Application services package.
"""

from .cache_invalidator import CacheInvalidator
from .job_store import CreateJobRequest, JobStore
from .notification_dispatcher import NotificationDispatcher
from .profile_service import ProfileService
from .rating_ledger import CreateRatingRequest, RatingLedger, RatingStats
from .sync_keys import RefreshPolicy, SyncKeys
from .sync_layer import CacheSnapshot, Subscription, SyncLayer, SyncTask

__all__ = [
    "CacheInvalidator",
    "CacheSnapshot",
    "CreateJobRequest",
    "CreateRatingRequest",
    "JobStore",
    "NotificationDispatcher",
    "ProfileService",
    "RatingLedger",
    "RatingStats",
    "RefreshPolicy",
    "Subscription",
    "SyncKeys",
    "SyncLayer",
    "SyncTask",
]
