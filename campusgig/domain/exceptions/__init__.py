"""
Domain exceptions package.
"""

from .access_error import NotFoundError, UnauthorizedError
from .base import MarketplaceError
from .job_error import AlreadyAssignedError, InvalidTransitionError
from .network_error import NetworkError
from .rating_error import DuplicateRatingError
from .validation_error import InvalidFormatError, RequiredFieldError, ValidationError

ERROR_TYPES = {
    cls.error_type: cls
    for cls in (
        ValidationError,
        InvalidTransitionError,
        AlreadyAssignedError,
        DuplicateRatingError,
        UnauthorizedError,
        NotFoundError,
        NetworkError,
    )
}

__all__ = [
    "ERROR_TYPES",
    "AlreadyAssignedError",
    "DuplicateRatingError",
    "InvalidFormatError",
    "InvalidTransitionError",
    "MarketplaceError",
    "NetworkError",
    "NotFoundError",
    "RequiredFieldError",
    "UnauthorizedError",
    "ValidationError",
]
