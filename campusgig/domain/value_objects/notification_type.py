"""
Notification type value object.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Kinds of notifications emitted by marketplace mutations."""

    JOB_ASSIGNED = "job_assigned"
    JOB_COMPLETED = "job_completed"
    JOB_CANCELLED = "job_cancelled"
    RATING_RECEIVED = "rating_received"

    @property
    def references_rating(self) -> bool:
        """Whether the payload reference is a rating id rather than a job id."""
        return self == self.RATING_RECEIVED
