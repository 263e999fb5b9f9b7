"""
Job status value object.
"""

from enum import Enum


class JobStatus(str, Enum):
    """Job lifecycle status enumeration."""

    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def is_final(self) -> bool:
        """Check if status is terminal (no transition leaves it)."""
        return self in [self.COMPLETED, self.CANCELLED]

    def is_visible_in_feed(self) -> bool:
        """Check if jobs with this status appear in the public feed."""
        return self in [self.OPEN, self.IN_PROGRESS]

    def is_deletable(self) -> bool:
        """Check if a job in this status may be removed by its poster."""
        return self in [self.OPEN, self.CANCELLED]

    def requires_assignee(self) -> bool:
        """Check if a job in this status must have an assigned helper."""
        return self in [self.IN_PROGRESS, self.COMPLETED]

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Check if the lifecycle allows moving from this status to target."""
        return target in _TRANSITIONS[self]

    @classmethod
    def feed_statuses(cls) -> list["JobStatus"]:
        return [status for status in cls if status.is_visible_in_feed()]

    @classmethod
    def deletable_statuses(cls) -> list["JobStatus"]:
        return [status for status in cls if status.is_deletable()]


_TRANSITIONS = {
    JobStatus.OPEN: {JobStatus.IN_PROGRESS, JobStatus.CANCELLED},
    JobStatus.IN_PROGRESS: {JobStatus.COMPLETED, JobStatus.CANCELLED},
    JobStatus.COMPLETED: set(),
    JobStatus.CANCELLED: set(),
}
