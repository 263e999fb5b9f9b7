"""
Job deleted domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class JobDeleted:
    """Event raised when a poster removes a job."""

    job_id: UUID
    poster_id: UUID
    deleted_at: datetime
