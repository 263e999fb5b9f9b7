"""
Rating-related API schemas.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from campusgig.domain.value_objects.rating_type import RatingType


class RatingCreateRequest(BaseModel):
    """Rating creation request; the rater is the caller."""

    job_id: UUID
    rated_user_id: UUID
    rating_type: str = Field(..., description="poster_to_helper or helper_to_poster")
    value: StrictInt
    review: Optional[str] = None


class RatingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    job_id: UUID
    rater_id: UUID
    rated_user_id: UUID
    rating_type: RatingType
    value: int
    review: Optional[str] = None
    created_at: datetime


class RatingStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    average_rating: float
    total_ratings: int
    tasks_completed: int
