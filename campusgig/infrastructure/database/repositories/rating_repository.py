"""Rating repository implementation."""

from typing import List, Set
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campusgig.application.interfaces.repositories import RatingRepositoryInterface
from campusgig.config.logging import get_logger
from campusgig.domain.entities.rating import Rating
from campusgig.domain.exceptions.rating_error import DuplicateRatingError
from campusgig.domain.value_objects.rating_type import RatingType
from campusgig.infrastructure.database.models.rating import RatingModel
from campusgig.infrastructure.database.models.base import as_utc

logger = get_logger(__name__)


class RatingRepository(RatingRepositoryInterface):
    """Rating repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, rating: Rating) -> Rating:
        """Insert a rating; raises DuplicateRatingError on a taken direction."""
        model = RatingModel(
            id=rating.id,
            job_id=rating.job_id,
            rater_id=rating.rater_id,
            rated_user_id=rating.rated_user_id,
            rating_type=rating.rating_type.value,
            value=rating.value,
            review=rating.review,
            created_at=rating.created_at,
        )

        self.db.add(model)
        try:
            await self.db.flush()
        except IntegrityError as e:
            # Lost the race against a concurrent insert for the same direction
            logger.warning(
                "Rating insert hit unique constraint",
                job_id=str(rating.job_id),
                rating_type=rating.rating_type.value,
                error=str(e.orig),
            )
            raise DuplicateRatingError(
                str(rating.job_id), rating.rating_type.value
            ) from e

        return self._model_to_entity(model)

    async def exists_for(self, job_id: UUID, rating_type: RatingType) -> bool:
        """Check whether a direction of a job has been rated."""
        stmt = select(RatingModel.id).where(
            and_(
                RatingModel.job_id == job_id,
                RatingModel.rating_type == rating_type.value,
            )
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def list_for_rated_user(self, user_id: UUID) -> List[Rating]:
        """List ratings received by a user, newest first."""
        stmt = (
            select(RatingModel)
            .where(RatingModel.rated_user_id == user_id)
            .order_by(RatingModel.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def rated_job_ids(
        self, rater_id: UUID, rating_type: RatingType
    ) -> Set[UUID]:
        """Job ids a user has already rated in the given direction."""
        stmt = select(RatingModel.job_id).where(
            and_(
                RatingModel.rater_id == rater_id,
                RatingModel.rating_type == rating_type.value,
            )
        )
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    def _model_to_entity(self, model: RatingModel) -> Rating:
        """Convert SQLAlchemy model to domain entity."""
        return Rating(
            id=model.id,
            job_id=model.job_id,
            rater_id=model.rater_id,
            rated_user_id=model.rated_user_id,
            rating_type=RatingType(model.rating_type),
            value=model.value,
            review=model.review,
            created_at=as_utc(model.created_at),
        )
