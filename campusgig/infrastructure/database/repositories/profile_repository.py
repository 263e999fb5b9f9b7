"""Profile repository implementation."""

from typing import Optional
from uuid import UUID

from sqlalchemy import Float, cast, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campusgig.application.interfaces.repositories import ProfileRepositoryInterface
from campusgig.config.logging import get_logger
from campusgig.domain.entities.profile import Profile
from campusgig.infrastructure.database.models.base import as_utc, utcnow
from campusgig.infrastructure.database.models.profile import ProfileModel

logger = get_logger(__name__)


class ProfileRepository(ProfileRepositoryInterface):
    """Profile repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: UUID) -> Optional[Profile]:
        """Get profile by user ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == user_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = ProfileModel(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            avatar_url=profile.avatar_url,
            average_rating=0.0,
            total_ratings=0,
            tasks_completed=0,
            created_at=profile.created_at,
        )

        self.db.add(model)
        await self.db.flush()

        logger.info("Profile created", user_id=str(profile.id))
        return self._model_to_entity(model)

    async def update_display_name(
        self, user_id: UUID, display_name: str
    ) -> Optional[Profile]:
        """Set the display name; returns None if the profile does not exist."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == user_id)
            .values(display_name=display_name, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            return None

        return await self.get_by_id(user_id)

    async def merge_rating(self, user_id: UUID, value: int) -> bool:
        """Atomically fold one rating value into the stored aggregate.

        Both columns are computed by the database from the row as it stands
        when the UPDATE executes, so concurrent merges for the same user
        serialize on the row lock instead of overwriting each other.
        """
        old_total = ProfileModel.total_ratings
        old_average = cast(ProfileModel.average_rating, Float)

        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == user_id)
            .values(
                average_rating=(old_average * old_total + value) / (old_total + 1),
                total_ratings=old_total + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        merged = result.rowcount == 1

        logger.debug(
            "Rating merged into profile aggregate",
            user_id=str(user_id),
            value=value,
            merged=merged,
        )
        return merged

    async def increment_tasks_completed(self, user_id: UUID) -> bool:
        """Atomically add one completed task to the profile."""
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == user_id)
            .values(
                tasks_completed=ProfileModel.tasks_completed + 1,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    def _model_to_entity(self, model: ProfileModel) -> Profile:
        """Convert SQLAlchemy model to domain entity."""
        return Profile(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            average_rating=float(model.average_rating or 0.0),
            total_ratings=model.total_ratings or 0,
            tasks_completed=model.tasks_completed or 0,
            created_at=as_utc(model.created_at),
        )
