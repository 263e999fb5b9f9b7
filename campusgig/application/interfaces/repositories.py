"""
Repository interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Set
from uuid import UUID

from campusgig.domain.entities.job import Job
from campusgig.domain.entities.notification import Notification
from campusgig.domain.entities.profile import Profile
from campusgig.domain.entities.rating import Rating
from campusgig.domain.value_objects.job_sort import JobSort
from campusgig.domain.value_objects.job_status import JobStatus
from campusgig.domain.value_objects.rating_type import RatingType

UNCHANGED = object()


@dataclass
class JobSearchCriteria:
    """Filters and ordering for job search."""

    query: Optional[str] = None
    category: Optional[str] = None
    urgency: Optional[str] = None
    location: Optional[str] = None
    status: Optional[JobStatus] = JobStatus.OPEN
    min_price: Optional[int] = None
    max_price: Optional[int] = None
    sort_by: JobSort = JobSort.NEWEST
    limit: int = 100


class JobRepositoryInterface(ABC):
    """Job repository interface."""

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID."""
        pass

    @abstractmethod
    async def create(self, job: Job) -> Job:
        """Create a new job."""
        pass

    @abstractmethod
    async def transition(
        self,
        job_id: UUID,
        expected: JobStatus,
        target: JobStatus,
        *,
        assigned_to=UNCHANGED,
        completed_at: Optional[datetime] = None,
    ) -> bool:
        """Compare-and-swap the job status.

        Returns True only if the stored status still equalled ``expected``
        at write time and the row was updated.
        """
        pass

    @abstractmethod
    async def delete_in_statuses(
        self, job_id: UUID, statuses: List[JobStatus]
    ) -> bool:
        """Delete the job only while its stored status is one of ``statuses``."""
        pass

    @abstractmethod
    async def list_by_statuses(
        self, statuses: List[JobStatus], limit: int = 100
    ) -> List[Job]:
        """List jobs in any of the given statuses, newest first."""
        pass

    @abstractmethod
    async def list_by_poster(self, poster_id: UUID) -> List[Job]:
        """List jobs posted by a user, newest first."""
        pass

    @abstractmethod
    async def list_by_assignee(self, helper_id: UUID) -> List[Job]:
        """List jobs assigned to a user, newest first."""
        pass

    @abstractmethod
    async def search(self, criteria: JobSearchCriteria) -> List[Job]:
        """Search jobs with filters and ordering."""
        pass


class ProfileRepositoryInterface(ABC):
    """Profile repository interface."""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[Profile]:
        """Get profile by user ID."""
        pass

    @abstractmethod
    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        pass

    @abstractmethod
    async def update_display_name(
        self, user_id: UUID, display_name: str
    ) -> Optional[Profile]:
        """Set the display name; returns None if the profile does not exist."""
        pass

    @abstractmethod
    async def merge_rating(self, user_id: UUID, value: int) -> bool:
        """Atomically fold one rating value into the stored aggregate."""
        pass

    @abstractmethod
    async def increment_tasks_completed(self, user_id: UUID) -> bool:
        """Atomically add one completed task to the profile."""
        pass


class RatingRepositoryInterface(ABC):
    """Rating repository interface."""

    @abstractmethod
    async def create(self, rating: Rating) -> Rating:
        """Insert a rating; raises DuplicateRatingError on a taken direction."""
        pass

    @abstractmethod
    async def exists_for(self, job_id: UUID, rating_type: RatingType) -> bool:
        """Check whether a direction of a job has been rated."""
        pass

    @abstractmethod
    async def list_for_rated_user(self, user_id: UUID) -> List[Rating]:
        """List ratings received by a user, newest first."""
        pass

    @abstractmethod
    async def rated_job_ids(
        self, rater_id: UUID, rating_type: RatingType
    ) -> Set[UUID]:
        """Job ids a user has already rated in the given direction."""
        pass


class NotificationRepositoryInterface(ABC):
    """Notification repository interface."""

    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        """Append a notification."""
        pass

    @abstractmethod
    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID."""
        pass

    @abstractmethod
    async def mark_read(self, notification_id: UUID) -> bool:
        """Mark one notification read; False if it was already read."""
        pass

    @abstractmethod
    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user read."""
        pass

    @abstractmethod
    async def count_unread(self, user_id: UUID) -> int:
        """Count unread notifications of a user."""
        pass

    @abstractmethod
    async def list_for_user(
        self, user_id: UUID, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        """List notifications of a user, newest first."""
        pass
