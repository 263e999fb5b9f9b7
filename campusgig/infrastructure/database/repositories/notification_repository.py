"""Notification repository implementation."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campusgig.application.interfaces.repositories import (
    NotificationRepositoryInterface,
)
from campusgig.domain.entities.notification import Notification
from campusgig.domain.value_objects.notification_type import NotificationType
from campusgig.infrastructure.database.models.base import as_utc, utcnow
from campusgig.infrastructure.database.models.notification import NotificationModel


class NotificationRepository(NotificationRepositoryInterface):
    """Notification repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, notification: Notification) -> Notification:
        """Append a notification."""
        model = NotificationModel(
            id=notification.id,
            user_id=notification.user_id,
            type=notification.type.value,
            ref_id=notification.ref_id,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )

        self.db.add(model)
        await self.db.flush()

        return self._model_to_entity(model)

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID."""
        stmt = select(NotificationModel).where(NotificationModel.id == notification_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def mark_read(self, notification_id: UUID) -> bool:
        """Mark one notification read; False if it was already read."""
        stmt = (
            update(NotificationModel)
            .where(
                and_(
                    NotificationModel.id == notification_id,
                    NotificationModel.is_read.is_(False),
                )
            )
            .values(is_read=True, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification of a user read."""
        stmt = (
            update(NotificationModel)
            .where(
                and_(
                    NotificationModel.user_id == user_id,
                    NotificationModel.is_read.is_(False),
                )
            )
            .values(is_read=True, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def count_unread(self, user_id: UUID) -> int:
        """Count unread notifications of a user."""
        stmt = select(func.count(NotificationModel.id)).where(
            and_(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def list_for_user(
        self, user_id: UUID, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        """List notifications of a user, newest first."""
        stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationModel.is_read.is_(False))
        stmt = stmt.order_by(NotificationModel.created_at.desc()).limit(limit)

        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    def _model_to_entity(self, model: NotificationModel) -> Notification:
        """Convert SQLAlchemy model to domain entity."""
        return Notification(
            id=model.id,
            user_id=model.user_id,
            type=NotificationType(model.type),
            ref_id=model.ref_id,
            is_read=bool(model.is_read),
            created_at=as_utc(model.created_at),
        )
