"""
Rating-related domain exceptions.
"""

from .base import MarketplaceError


class DuplicateRatingError(MarketplaceError):
    """Raised when a job has already been rated in the given direction."""

    error_type = "duplicate_rating"

    def __init__(self, job_id: str, rating_type: str):
        self.job_id = job_id
        self.rating_type = rating_type
        super().__init__(f"Job {job_id} already has a '{rating_type}' rating")
