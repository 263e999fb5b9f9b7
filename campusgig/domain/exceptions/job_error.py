"""
Job lifecycle domain exceptions.
"""

from .base import MarketplaceError


class InvalidTransitionError(MarketplaceError):
    """Raised when an operation is attempted from a status that forbids it."""

    error_type = "invalid_transition"

    def __init__(self, current_status: str, attempted: str, message: str = None):
        self.current_status = current_status
        self.attempted = attempted
        super().__init__(
            message
            or f"Cannot {attempted} a job with status '{current_status}'"
        )


class AlreadyAssignedError(MarketplaceError):
    """Raised when an assignment loses the race to another helper."""

    error_type = "already_assigned"

    def __init__(self, job_id: str, assigned_to: str = None):
        self.job_id = job_id
        self.assigned_to = assigned_to
        super().__init__(f"Job {job_id} has already been assigned")
