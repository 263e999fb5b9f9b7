"""
API schemas for the marketplace service.
"""

from .common import CountResponse, ErrorResponse
from .job import (
    AssignHelperRequest,
    JobCreateRequest,
    JobListItemResponse,
    JobResponse,
    JobSearchParams,
)
from .notification import NotificationResponse
from .profile import DisplayNameUpdateRequest, ProfileRegisterRequest, ProfileResponse
from .rating import RatingCreateRequest, RatingResponse, RatingStatsResponse

__all__ = [
    "AssignHelperRequest",
    "CountResponse",
    "DisplayNameUpdateRequest",
    "ErrorResponse",
    "JobCreateRequest",
    "JobListItemResponse",
    "JobResponse",
    "JobSearchParams",
    "NotificationResponse",
    "ProfileRegisterRequest",
    "ProfileResponse",
    "RatingCreateRequest",
    "RatingResponse",
    "RatingStatsResponse",
]
