"""
Rating SQLAlchemy model.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)

from .base import BaseModel


class RatingModel(BaseModel):
    """Rating database model."""

    __tablename__ = "ratings"
    __table_args__ = (
        # Each direction of a job can be rated exactly once
        UniqueConstraint("job_id", "rating_type", name="uq_ratings_job_direction"),
        CheckConstraint("value >= 1 AND value <= 5", name="ck_ratings_value_range"),
        CheckConstraint(
            "rating_type IN ('poster_to_helper', 'helper_to_poster')",
            name="ck_ratings_type",
        ),
    )

    job_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rater_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    rated_user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    rating_type = Column(String(20), nullable=False)
    value = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Rating(id={self.id}, job_id={self.job_id}, type={self.rating_type})>"
