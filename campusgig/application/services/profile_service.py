"""
Profile service: registration and display names.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.application.services.sync_keys import SyncKeys
from campusgig.config.logging import get_logger
from campusgig.domain.entities.profile import Profile, normalize_display_name
from campusgig.domain.exceptions.access_error import NotFoundError
from campusgig.infrastructure.database.connection import Database
from campusgig.infrastructure.database.repositories.profile_repository import (
    ProfileRepository,
)

logger = get_logger(__name__)


class ProfileService:
    """Profiles of authenticated users."""

    def __init__(
        self, database: Database, invalidator: Optional[CacheInvalidator] = None
    ):
        self.database = database
        self.invalidator = invalidator

    async def ensure_profile(
        self, user_id: UUID, email: str, display_name: Optional[str] = None
    ) -> Profile:
        """Return the user's profile, creating it on first sign-in."""
        existing = await self._find(user_id)
        if existing is not None:
            return existing

        profile = Profile(id=user_id, email=email, display_name=display_name)
        try:
            async with self.database.transaction() as session:
                created = await ProfileRepository(session).create(profile)
        except IntegrityError:
            # A concurrent sign-in created it first
            logger.warning("Profile created concurrently", user_id=str(user_id))
            existing = await self._find(user_id)
            if existing is None:
                raise
            return existing

        self._invalidate(user_id)
        return created

    async def get_profile(self, user_id: UUID) -> Profile:
        profile = await self._find(user_id)
        if profile is None:
            raise NotFoundError("profile", str(user_id))
        return profile

    async def update_display_name(self, user_id: UUID, display_name: str) -> Profile:
        name = normalize_display_name(display_name)

        async with self.database.transaction() as session:
            profile = await ProfileRepository(session).update_display_name(
                user_id, name
            )
        if profile is None:
            raise NotFoundError("profile", str(user_id))

        logger.info("Display name updated", user_id=str(user_id))
        self._invalidate(user_id)
        return profile

    async def _find(self, user_id: UUID) -> Optional[Profile]:
        async with self.database.session() as session:
            return await ProfileRepository(session).get_by_id(user_id)

    def _invalidate(self, user_id: UUID) -> None:
        if self.invalidator is not None:
            self.invalidator.invalidate(SyncKeys.profile(user_id))
