"""
Job status changed domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from campusgig.domain.value_objects.job_status import JobStatus


@dataclass
class JobStatusChanged:
    """Event raised when a job is created or moves through its lifecycle."""

    job_id: UUID
    poster_id: UUID
    status: JobStatus
    changed_at: datetime
    previous_status: Optional[JobStatus] = None
    helper_id: Optional[UUID] = None
    # Recipient of the notification written with the change, if any
    notified_id: Optional[UUID] = None
