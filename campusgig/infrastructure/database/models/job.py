"""
Job SQLAlchemy model.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)

from .base import BaseModel


class JobModel(BaseModel):
    """Job database model."""

    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_jobs_price_positive"),
        CheckConstraint(
            "status IN ('open', 'in_progress', 'completed', 'cancelled')",
            name="ck_jobs_status",
        ),
        # assigned_to is set exactly when the job is in_progress or completed
        CheckConstraint(
            "(assigned_to IS NULL) = (status IN ('open', 'cancelled'))",
            name="ck_jobs_assignee_matches_status",
        ),
        Index("ix_jobs_status_created_at", "status", "created_at"),
    )

    poster_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    assigned_to = Column(Uuid(as_uuid=True), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Integer, nullable=False, index=True)
    urgency = Column(String(50), nullable=False, default="Flexible", index=True)
    location = Column(String(255), nullable=False, default="Campus", index=True)
    category = Column(String(100), nullable=False, default="Other", index=True)

    status = Column(String(20), nullable=False, default="open", index=True)
    completed_at = Column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title[:50]}, status={self.status})>"
