"""
Job store: creation, lifecycle transitions and job reads.

Every transition is a compare-and-swap on the stored status. Whichever
request reaches the database first wins; the loser re-reads the job to
report why it lost.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from campusgig.application.interfaces.repositories import JobSearchCriteria
from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from campusgig.config.logging import get_logger
from campusgig.domain.entities.job import Job
from campusgig.domain.events.job_deleted import JobDeleted
from campusgig.domain.events.job_status_changed import JobStatusChanged
from campusgig.domain.exceptions.access_error import NotFoundError, UnauthorizedError
from campusgig.domain.exceptions.job_error import (
    AlreadyAssignedError,
    InvalidTransitionError,
)
from campusgig.domain.exceptions.validation_error import ValidationError
from campusgig.domain.value_objects.job_status import JobStatus
from campusgig.domain.value_objects.notification_type import NotificationType
from campusgig.infrastructure.database.connection import Database
from campusgig.infrastructure.database.repositories.job_repository import (
    JobRepository,
)
from campusgig.infrastructure.database.repositories.profile_repository import (
    ProfileRepository,
)
from campusgig.infrastructure.monitoring.metrics import (
    record_assignment_conflict,
    record_job_creation,
    record_job_deletion,
    record_job_transition,
)

logger = get_logger(__name__)

MAX_CANCEL_ATTEMPTS = 3
FEED_LIMIT = 100


@dataclass
class CreateJobRequest:
    """Request for posting a job."""

    title: str
    price: int
    description: str = ""
    urgency: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None


class JobStore:
    """Owns the job lifecycle: open, in_progress, completed, cancelled."""

    def __init__(
        self,
        database: Database,
        notifications: NotificationDispatcher,
        invalidator: Optional[CacheInvalidator] = None,
    ):
        self.database = database
        self.notifications = notifications
        self.invalidator = invalidator

    async def create_job(self, poster_id: UUID, request: CreateJobRequest) -> Job:
        """Post a new open job."""
        job = Job(
            title=request.title.strip() if request.title else request.title,
            price=request.price,
            poster_id=poster_id,
            description=request.description,
            urgency=request.urgency,
            location=request.location,
            category=request.category,
        )

        async with self.database.transaction() as session:
            created = await JobRepository(session).create(job)

        record_job_creation(created.category)
        logger.info(
            "Job created",
            job_id=str(created.id),
            poster_id=str(poster_id),
            price=created.price,
            category=created.category,
        )
        self._publish(created, previous_status=None)
        return created

    async def assign_helper(
        self, job_id: UUID, helper_id: UUID, caller_id: Optional[UUID] = None
    ) -> Job:
        """Assign a helper to an open job.

        The caller is either the helper accepting the job for themselves
        (the default) or the poster assigning someone. The other party is
        notified. Exactly one of any number of concurrent calls for the same
        open job succeeds; the others fail with AlreadyAssignedError.
        """
        caller_id = caller_id or helper_id

        async with self.database.transaction() as session:
            jobs = JobRepository(session)

            # 1. Pre-checks against the job as currently stored
            job = await jobs.get_by_id(job_id)
            if job is None:
                raise NotFoundError("job", str(job_id))
            if job.status.is_final():
                raise InvalidTransitionError(job.status.value, "assign")
            if job.is_poster(helper_id):
                raise ValidationError("Posters cannot accept their own job")
            if caller_id != helper_id and not job.is_poster(caller_id):
                raise UnauthorizedError(
                    "Only the poster can assign a job to someone else"
                )
            if job.status == JobStatus.IN_PROGRESS:
                record_assignment_conflict()
                raise AlreadyAssignedError(str(job_id), str(job.assigned_to))

            # 2. Compare-and-swap open -> in_progress
            swapped = await jobs.transition(
                job_id,
                JobStatus.OPEN,
                JobStatus.IN_PROGRESS,
                assigned_to=helper_id,
            )
            if not swapped:
                current = await jobs.get_by_id(job_id)
                if current is not None and current.status.requires_assignee():
                    record_assignment_conflict()
                    logger.warning(
                        "Assignment lost the race",
                        job_id=str(job_id),
                        helper_id=str(helper_id),
                        winner_id=str(current.assigned_to),
                    )
                    raise AlreadyAssignedError(str(job_id), str(current.assigned_to))
                status = current.status.value if current else "deleted"
                raise InvalidTransitionError(status, "assign")

            assigned = await jobs.get_by_id(job_id)

            # 3. Notify the other party inside the same transaction
            recipient_id = assigned.counterpart_of(caller_id)
            await self.notifications.notify(
                recipient_id, NotificationType.JOB_ASSIGNED, job_id, session=session
            )

        record_job_transition(JobStatus.OPEN.value, JobStatus.IN_PROGRESS.value)
        logger.info(
            "Helper assigned",
            job_id=str(job_id),
            helper_id=str(helper_id),
            assigned_by=str(caller_id),
        )
        self._publish(
            assigned, previous_status=JobStatus.OPEN, notified_id=recipient_id
        )
        return assigned

    async def complete_job(self, job_id: UUID, caller_id: UUID) -> Job:
        """Mark an in-progress job completed; only the poster may do this."""
        async with self.database.transaction() as session:
            jobs = JobRepository(session)

            job = await jobs.get_by_id(job_id)
            if job is None:
                raise NotFoundError("job", str(job_id))
            if not job.is_poster(caller_id):
                raise UnauthorizedError("Only the poster can complete a job")
            job.ensure_can_transition(JobStatus.COMPLETED, "complete")

            swapped = await jobs.transition(
                job_id,
                JobStatus.IN_PROGRESS,
                JobStatus.COMPLETED,
                completed_at=datetime.now(timezone.utc),
            )
            if not swapped:
                current = await jobs.get_by_id(job_id)
                status = current.status.value if current else "deleted"
                raise InvalidTransitionError(status, "complete")

            completed = await jobs.get_by_id(job_id)

            if not await ProfileRepository(session).increment_tasks_completed(
                completed.assigned_to
            ):
                logger.warning(
                    "Helper has no profile; tasks completed not counted",
                    job_id=str(job_id),
                    helper_id=str(completed.assigned_to),
                )

            await self.notifications.notify(
                completed.assigned_to,
                NotificationType.JOB_COMPLETED,
                job_id,
                session=session,
            )

        record_job_transition(JobStatus.IN_PROGRESS.value, JobStatus.COMPLETED.value)
        logger.info(
            "Job completed", job_id=str(job_id), helper_id=str(completed.assigned_to)
        )
        self._publish(
            completed,
            previous_status=JobStatus.IN_PROGRESS,
            notified_id=completed.assigned_to,
        )
        return completed

    async def cancel_job(self, job_id: UUID, caller_id: UUID) -> Job:
        """Cancel an open or in-progress job; only the poster may do this."""
        async with self.database.transaction() as session:
            jobs = JobRepository(session)

            job = await jobs.get_by_id(job_id)
            if job is None:
                raise NotFoundError("job", str(job_id))
            if not job.is_poster(caller_id):
                raise UnauthorizedError("Only the poster can cancel a job")

            # An open job can be assigned between the read and the swap;
            # retry against the status actually stored while it is cancellable.
            for _ in range(MAX_CANCEL_ATTEMPTS):
                job.ensure_can_transition(JobStatus.CANCELLED, "cancel")
                swapped = await jobs.transition(
                    job_id, job.status, JobStatus.CANCELLED, assigned_to=None
                )
                if swapped:
                    break
                job = await jobs.get_by_id(job_id)
                if job is None:
                    raise NotFoundError("job", str(job_id))
            else:
                raise InvalidTransitionError(
                    job.status.value,
                    "cancel",
                    message="Job changed concurrently; reload it and try again",
                )

            previous = job
            cancelled = await jobs.get_by_id(job_id)

            if previous.assigned_to is not None:
                await self.notifications.notify(
                    previous.assigned_to,
                    NotificationType.JOB_CANCELLED,
                    job_id,
                    session=session,
                )

        record_job_transition(previous.status.value, JobStatus.CANCELLED.value)
        logger.info(
            "Job cancelled",
            job_id=str(job_id),
            previous_status=previous.status.value,
            helper_id=str(previous.assigned_to) if previous.assigned_to else None,
        )
        self._publish(
            cancelled,
            previous_status=previous.status,
            helper_id=previous.assigned_to,
            notified_id=previous.assigned_to,
        )
        return cancelled

    async def delete_job(self, job_id: UUID, caller_id: UUID) -> None:
        """Remove an open or cancelled job; only the poster may do this.

        Jobs that are in progress must be cancelled first. Completed jobs
        carry ratings and counted tasks and are kept.
        """
        async with self.database.transaction() as session:
            jobs = JobRepository(session)

            job = await jobs.get_by_id(job_id)
            if job is None:
                raise NotFoundError("job", str(job_id))
            if not job.is_poster(caller_id):
                raise UnauthorizedError("Only the poster can delete a job")
            if not job.status.is_deletable():
                raise InvalidTransitionError(job.status.value, "delete")

            deleted = await jobs.delete_in_statuses(
                job_id, JobStatus.deletable_statuses()
            )
            if not deleted:
                current = await jobs.get_by_id(job_id)
                if current is None:
                    raise NotFoundError("job", str(job_id))
                raise InvalidTransitionError(current.status.value, "delete")

        record_job_deletion(job.status.value)
        logger.info(
            "Job deleted",
            job_id=str(job_id),
            poster_id=str(caller_id),
            status=job.status.value,
        )
        if self.invalidator is not None:
            self.invalidator.job_deleted(
                JobDeleted(
                    job_id=job_id,
                    poster_id=job.poster_id,
                    deleted_at=datetime.now(timezone.utc),
                )
            )

    async def get_job(self, job_id: UUID) -> Job:
        async with self.database.session() as session:
            job = await JobRepository(session).get_by_id(job_id)
        if job is None:
            raise NotFoundError("job", str(job_id))
        return job

    async def list_feed(self, limit: int = FEED_LIMIT) -> List[Job]:
        """Jobs open or in progress, newest first."""
        async with self.database.session() as session:
            return await JobRepository(session).list_by_statuses(
                JobStatus.feed_statuses(), limit=limit
            )

    async def list_posted_by(self, user_id: UUID) -> List[Job]:
        async with self.database.session() as session:
            return await JobRepository(session).list_by_poster(user_id)

    async def list_assigned_to(self, user_id: UUID) -> List[Job]:
        async with self.database.session() as session:
            return await JobRepository(session).list_by_assignee(user_id)

    async def search_jobs(self, criteria: JobSearchCriteria) -> List[Job]:
        """Filtered, ordered job search."""
        if (
            criteria.min_price is not None
            and criteria.max_price is not None
            and criteria.min_price > criteria.max_price
        ):
            raise ValidationError("Minimum price cannot exceed maximum price")

        async with self.database.session() as session:
            return await JobRepository(session).search(criteria)

    def _publish(
        self,
        job: Job,
        previous_status: Optional[JobStatus],
        helper_id: Optional[UUID] = None,
        notified_id: Optional[UUID] = None,
    ) -> None:
        if self.invalidator is None:
            return
        self.invalidator.job_changed(
            JobStatusChanged(
                job_id=job.id,
                poster_id=job.poster_id,
                status=job.status,
                changed_at=job.updated_at,
                previous_status=previous_status,
                helper_id=helper_id or job.assigned_to,
                notified_id=notified_id,
            )
        )
