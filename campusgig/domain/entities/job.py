"""Job domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from campusgig.domain.exceptions.job_error import InvalidTransitionError
from campusgig.domain.exceptions.validation_error import (
    InvalidFormatError,
    RequiredFieldError,
    ValidationError,
)
from campusgig.domain.value_objects.job_status import JobStatus

DEFAULT_URGENCY = "Flexible"
DEFAULT_LOCATION = "Campus"
DEFAULT_CATEGORY = "Other"
TITLE_MAX_LENGTH = 200


@dataclass
class Job:
    """Job domain entity."""

    title: str
    price: int
    poster_id: UUID
    description: str = ""
    urgency: str = DEFAULT_URGENCY
    location: str = DEFAULT_LOCATION
    category: str = DEFAULT_CATEGORY
    status: JobStatus = JobStatus.OPEN
    assigned_to: Optional[UUID] = None
    id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate job data."""
        if not self.title or not self.title.strip():
            raise RequiredFieldError("title")
        if len(self.title) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be at most {TITLE_MAX_LENGTH} characters"
            )
        # bool is an int subclass; a checkbox value is not a price
        if isinstance(self.price, bool) or not isinstance(self.price, int):
            raise InvalidFormatError("price", "integer in currency minor units")
        if self.price <= 0:
            raise ValidationError("Price must be greater than zero")
        if not self.poster_id:
            raise RequiredFieldError("poster_id")

        self.status = JobStatus(self.status)
        if self.status.requires_assignee() != (self.assigned_to is not None):
            raise ValidationError(
                f"Job with status '{self.status.value}' has inconsistent assignee"
            )

        self.urgency = self.urgency or DEFAULT_URGENCY
        self.location = self.location or DEFAULT_LOCATION
        self.category = self.category or DEFAULT_CATEGORY
        self.description = self.description or ""

        # Set timestamps if not provided
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)
        if not self.updated_at:
            self.updated_at = self.created_at

    def is_poster(self, user_id: UUID) -> bool:
        return self.poster_id == user_id

    def is_helper(self, user_id: UUID) -> bool:
        return self.assigned_to is not None and self.assigned_to == user_id

    def counterpart_of(self, user_id: UUID) -> Optional[UUID]:
        """Return the other party of the job, if there is one."""
        if self.is_poster(user_id):
            return self.assigned_to
        if self.is_helper(user_id):
            return self.poster_id
        return None

    def ensure_can_transition(self, target: JobStatus, action: str) -> None:
        """Raise InvalidTransitionError if the lifecycle forbids target."""
        if not self.status.can_transition_to(target):
            raise InvalidTransitionError(self.status.value, action)
