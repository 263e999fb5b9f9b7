"""
Rating ledger: reciprocal ratings on completed jobs and profile aggregates.
"""

from dataclasses import dataclass
from typing import List, Optional, Set
from uuid import UUID

from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from campusgig.config.logging import get_logger
from campusgig.domain.entities.job import Job
from campusgig.domain.entities.rating import (
    Rating,
    validate_rating_value,
    validate_review,
)
from campusgig.domain.events.rating_recorded import RatingRecorded
from campusgig.domain.exceptions.access_error import NotFoundError, UnauthorizedError
from campusgig.domain.exceptions.job_error import InvalidTransitionError
from campusgig.domain.exceptions.rating_error import DuplicateRatingError
from campusgig.domain.exceptions.validation_error import ValidationError
from campusgig.domain.value_objects.job_status import JobStatus
from campusgig.domain.value_objects.notification_type import NotificationType
from campusgig.domain.value_objects.rating_type import RatingType
from campusgig.infrastructure.database.connection import Database
from campusgig.infrastructure.database.repositories.job_repository import (
    JobRepository,
)
from campusgig.infrastructure.database.repositories.profile_repository import (
    ProfileRepository,
)
from campusgig.infrastructure.database.repositories.rating_repository import (
    RatingRepository,
)
from campusgig.infrastructure.monitoring.metrics import record_rating

logger = get_logger(__name__)


@dataclass
class CreateRatingRequest:
    """Request for rating the counterpart of a completed job."""

    job_id: UUID
    rater_id: UUID
    rated_user_id: UUID
    rating_type: str
    value: int
    review: Optional[str] = None


@dataclass
class RatingStats:
    """Presentation view of a user's rating aggregate."""

    average_rating: float
    total_ratings: int
    tasks_completed: int


def expected_pairing(job: Job, rating_type: RatingType):
    """Return the (rater, rated) pair a rating direction requires."""
    if rating_type == RatingType.POSTER_TO_HELPER:
        return job.poster_id, job.assigned_to
    return job.assigned_to, job.poster_id


class RatingLedger:
    """Records ratings and folds them into the rated user's aggregate."""

    def __init__(
        self,
        database: Database,
        notifications: NotificationDispatcher,
        invalidator: Optional[CacheInvalidator] = None,
    ):
        self.database = database
        self.notifications = notifications
        self.invalidator = invalidator

    async def create_rating(self, request: CreateRatingRequest) -> Rating:
        """Record one direction of the rating on a completed job.

        The insert, the aggregate merge and the notification commit together
        or not at all.
        """
        try:
            rating_type = RatingType(request.rating_type)
        except ValueError:
            raise ValidationError(f"Unknown rating type '{request.rating_type}'")

        async with self.database.transaction() as session:
            ratings = RatingRepository(session)

            # 1. Only completed jobs can be rated
            job = await JobRepository(session).get_by_id(request.job_id)
            if job is None:
                raise NotFoundError("job", str(request.job_id))
            if job.status != JobStatus.COMPLETED:
                raise InvalidTransitionError(job.status.value, "rate")

            # 2. Rater and rated user must be the job's two parties
            if expected_pairing(job, rating_type) != (
                request.rater_id,
                request.rated_user_id,
            ):
                raise UnauthorizedError(
                    f"Only the {rating_type.rater_role} can give a "
                    f"'{rating_type.value}' rating for this job"
                )

            # 3. One rating per direction
            if await ratings.exists_for(job.id, rating_type):
                logger.warning(
                    "Duplicate rating rejected",
                    job_id=str(job.id),
                    rating_type=rating_type.value,
                )
                raise DuplicateRatingError(str(job.id), rating_type.value)

            # 4. Value and review
            validate_rating_value(request.value)
            review = validate_review(request.review)

            rating = await ratings.create(
                Rating(
                    job_id=job.id,
                    rater_id=request.rater_id,
                    rated_user_id=request.rated_user_id,
                    rating_type=rating_type,
                    value=request.value,
                    review=review,
                )
            )

            # 5. Atomic aggregate merge
            merged = await ProfileRepository(session).merge_rating(
                rating.rated_user_id, rating.value
            )
            if not merged:
                raise NotFoundError("profile", str(rating.rated_user_id))

            # 6. Notify the rated user
            await self.notifications.notify(
                rating.rated_user_id,
                NotificationType.RATING_RECEIVED,
                rating.id,
                session=session,
            )

        record_rating(rating.rating_type.value)
        logger.info(
            "Rating recorded",
            rating_id=str(rating.id),
            job_id=str(rating.job_id),
            rating_type=rating.rating_type.value,
            value=rating.value,
        )

        if self.invalidator is not None:
            self.invalidator.rating_recorded(
                RatingRecorded(
                    rating_id=rating.id,
                    job_id=rating.job_id,
                    rater_id=rating.rater_id,
                    rated_user_id=rating.rated_user_id,
                    rating_type=rating.rating_type,
                    recorded_at=rating.created_at,
                )
            )
        return rating

    async def list_ratings_for_user(self, user_id: UUID) -> List[Rating]:
        """Ratings received by a user, newest first."""
        async with self.database.session() as session:
            return await RatingRepository(session).list_for_rated_user(user_id)

    async def get_rating_stats(self, user_id: UUID) -> RatingStats:
        async with self.database.session() as session:
            profile = await ProfileRepository(session).get_by_id(user_id)

        if profile is None:
            return RatingStats(average_rating=0.0, total_ratings=0, tasks_completed=0)

        # Stored unrounded; rounding is for display only
        return RatingStats(
            average_rating=round(profile.average_rating, 1),
            total_ratings=profile.total_ratings,
            tasks_completed=profile.tasks_completed,
        )

    async def rated_job_ids(self, rater_id: UUID, rating_type: RatingType) -> Set[UUID]:
        async with self.database.session() as session:
            return await RatingRepository(session).rated_job_ids(
                rater_id, RatingType(rating_type)
            )
