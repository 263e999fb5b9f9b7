"""Rating domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from campusgig.domain.exceptions.validation_error import ValidationError
from campusgig.domain.value_objects.rating_type import RatingType

MIN_RATING = 1
MAX_RATING = 5
REVIEW_MAX_LENGTH = 500


@dataclass
class Rating:
    """One direction of the reciprocal rating on a completed job."""

    job_id: UUID
    rater_id: UUID
    rated_user_id: UUID
    rating_type: RatingType
    value: int
    review: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate rating data."""
        try:
            self.rating_type = RatingType(self.rating_type)
        except ValueError:
            raise ValidationError(f"Unknown rating type '{self.rating_type}'")

        validate_rating_value(self.value)
        self.review = validate_review(self.review)

        if self.rater_id == self.rated_user_id:
            raise ValidationError("Users cannot rate themselves")

        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)


def validate_rating_value(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Rating must be a whole number")
    if value < MIN_RATING or value > MAX_RATING:
        raise ValidationError(
            f"Rating must be between {MIN_RATING} and {MAX_RATING}"
        )


def validate_review(review: Optional[str]) -> Optional[str]:
    """Return the review with blank text collapsed to None."""
    if review is None or not review.strip():
        return None
    if len(review) > REVIEW_MAX_LENGTH:
        raise ValidationError(
            f"Review must be at most {REVIEW_MAX_LENGTH} characters"
        )
    return review
