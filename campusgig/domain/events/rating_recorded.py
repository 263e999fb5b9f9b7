"""
Rating recorded domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from campusgig.domain.value_objects.rating_type import RatingType


@dataclass
class RatingRecorded:
    """Event raised when a rating is committed and merged into an aggregate."""

    rating_id: UUID
    job_id: UUID
    rater_id: UUID
    rated_user_id: UUID
    rating_type: RatingType
    recorded_at: datetime
