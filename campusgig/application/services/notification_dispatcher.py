"""
Notification dispatcher.

Notifications are written inside the transaction of the mutation that
caused them, so a rolled-back mutation never leaves a notification behind.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.application.services.sync_keys import SyncKeys
from campusgig.config.logging import get_logger
from campusgig.config.settings import settings
from campusgig.domain.entities.notification import Notification
from campusgig.domain.events.notification_read import NotificationsRead
from campusgig.domain.exceptions.access_error import NotFoundError, UnauthorizedError
from campusgig.domain.value_objects.notification_type import NotificationType
from campusgig.infrastructure.database.connection import Database
from campusgig.infrastructure.database.repositories.notification_repository import (
    NotificationRepository,
)
from campusgig.infrastructure.monitoring.metrics import record_notification

logger = get_logger(__name__)


class NotificationDispatcher:
    """Creates notifications and manages their read state."""

    def __init__(
        self, database: Database, invalidator: Optional[CacheInvalidator] = None
    ):
        self.database = database
        self.invalidator = invalidator

    async def notify(
        self,
        user_id: UUID,
        notification_type: NotificationType,
        ref_id: UUID,
        session: Optional[AsyncSession] = None,
    ) -> Notification:
        """Append an unread notification for a user.

        With a session the notification joins the caller's transaction and
        the caller is responsible for invalidating the unread count once it
        commits. Without one it is committed on its own.
        """
        notification = Notification(
            user_id=user_id, type=NotificationType(notification_type), ref_id=ref_id
        )

        if session is not None:
            created = await NotificationRepository(session).create(notification)
        else:
            async with self.database.transaction() as own_session:
                created = await NotificationRepository(own_session).create(
                    notification
                )
            self._invalidate_unread(user_id)

        record_notification(created.type.value)
        logger.info(
            "Notification created",
            notification_id=str(created.id),
            user_id=str(user_id),
            type=created.type.value,
            ref_id=str(ref_id),
        )
        return created

    async def mark_read(self, notification_id: UUID, caller_id: UUID) -> Notification:
        """Mark one of the caller's notifications read.

        Marking an already read notification is a no-op.
        """
        async with self.database.transaction() as session:
            repo = NotificationRepository(session)
            notification = await repo.get_by_id(notification_id)
            if notification is None:
                raise NotFoundError("notification", str(notification_id))
            if not notification.is_owned_by(caller_id):
                raise UnauthorizedError(
                    "Only the recipient can mark a notification as read"
                )
            changed = await repo.mark_read(notification_id)

        notification.is_read = True
        if changed:
            self._publish_read(caller_id, 1)
        return notification

    async def mark_all_read(self, caller_id: UUID) -> int:
        async with self.database.transaction() as session:
            count = await NotificationRepository(session).mark_all_read(caller_id)

        if count:
            self._publish_read(caller_id, count)
        logger.info("Notifications marked read", user_id=str(caller_id), count=count)
        return count

    async def unread_count(self, user_id: UUID) -> int:
        async with self.database.session() as session:
            return await NotificationRepository(session).count_unread(user_id)

    async def list_for_user(
        self,
        user_id: UUID,
        unread_only: bool = False,
        limit: Optional[int] = None,
    ) -> List[Notification]:
        """List a user's notifications, newest first."""
        async with self.database.session() as session:
            return await NotificationRepository(session).list_for_user(
                user_id,
                unread_only=unread_only,
                limit=limit or settings.NOTIFICATION_PAGE_SIZE,
            )

    def _publish_read(self, user_id: UUID, count: int) -> None:
        if self.invalidator is not None:
            self.invalidator.notifications_read(
                NotificationsRead(
                    user_id=user_id, count=count, read_at=datetime.now(timezone.utc)
                )
            )

    def _invalidate_unread(self, user_id: UUID) -> None:
        if self.invalidator is not None:
            self.invalidator.invalidate(SyncKeys.unread(user_id))
