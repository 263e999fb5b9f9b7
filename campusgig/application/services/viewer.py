"""
Viewer: one signed-in user's session against the marketplace API.

Reads go through the viewer's SyncLayer; writes go straight to the API and
then invalidate the keys they affect, so the session's next read of those
keys reflects its own write.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from campusgig.application.services.cache_invalidator import CacheInvalidator
from campusgig.application.services.sync_keys import SyncKeys
from campusgig.application.services.sync_layer import (
    CacheSnapshot,
    Listener,
    Subscription,
    SyncLayer,
)
from campusgig.config.logging import get_logger
from campusgig.domain.events.job_deleted import JobDeleted
from campusgig.domain.events.job_status_changed import JobStatusChanged
from campusgig.domain.events.notification_read import NotificationsRead
from campusgig.domain.events.rating_recorded import RatingRecorded
from campusgig.infrastructure.external.marketplace_client import MarketplaceClient

logger = get_logger(__name__)


class Viewer:
    """Cached reads and invalidating writes for one user."""

    def __init__(
        self,
        client: MarketplaceClient,
        sync: Optional[SyncLayer] = None,
        invalidator: Optional[CacheInvalidator] = None,
    ):
        self.client = client
        self.user_id = client.user_id
        self.sync = sync or SyncLayer(client.settings)
        self.invalidator = invalidator or CacheInvalidator()
        self.invalidator.register(self.sync)

        self.sync.register(SyncKeys.FEED, client.list_feed)
        self.sync.register(SyncKeys.my_jobs(self.user_id), client.list_my_jobs)
        self.sync.register(SyncKeys.gigs(self.user_id), client.list_my_gigs)
        self.sync.register(SyncKeys.profile(self.user_id), client.get_profile)
        self.sync.register(SyncKeys.unread(self.user_id), client.unread_count)

    # Reads
    async def feed(self) -> CacheSnapshot:
        return await self.sync.get(SyncKeys.FEED)

    async def my_jobs(self) -> CacheSnapshot:
        return await self.sync.get(SyncKeys.my_jobs(self.user_id))

    async def my_gigs(self) -> CacheSnapshot:
        return await self.sync.get(SyncKeys.gigs(self.user_id))

    async def profile(self, user_id: Optional[UUID] = None) -> CacheSnapshot:
        """Own profile, or another user's registered on first access."""
        user_id = user_id or self.user_id
        key = SyncKeys.profile(user_id)

        async def fetch_profile():
            return await self.client.get_profile(user_id)

        if key in self.sync.keys():
            return await self.sync.get(key)
        return await self.sync.get(key, fetch_profile)

    async def unread_count(self) -> CacheSnapshot:
        return await self.sync.get(SyncKeys.unread(self.user_id))

    def subscribe(self, key: str, listener: Listener) -> Subscription:
        return self.sync.subscribe(key, listener)

    def focus(self) -> int:
        """The viewer regained focus; refetch focus-sensitive keys."""
        return self.sync.focus()

    # Writes
    async def post_job(self, title: str, price: int, **fields: Any):
        job = await self.client.create_job(title, price, **fields)
        self._job_changed(job)
        return job

    async def accept_job(self, job_id: UUID):
        job = await self.client.assign_helper(job_id)
        self._job_changed(job, notified_id=job.poster_id)
        return job

    async def assign_job(self, job_id: UUID, helper_id: UUID):
        """Assign a helper to one of the viewer's own jobs."""
        job = await self.client.assign_helper(job_id, helper_id)
        self._job_changed(job, notified_id=job.assigned_to)
        return job

    async def complete_job(self, job_id: UUID):
        job = await self.client.complete_job(job_id)
        self._job_changed(job, notified_id=job.assigned_to)
        return job

    async def cancel_job(self, job_id: UUID):
        # The cancelled job comes back unassigned; keep the helper it had
        before = await self.client.get_job(job_id)
        job = await self.client.cancel_job(job_id)
        self._job_changed(
            job, helper_id=before.assigned_to, notified_id=before.assigned_to
        )
        return job

    async def delete_job(self, job_id: UUID) -> None:
        await self.client.delete_job(job_id)
        self.invalidator.job_deleted(
            JobDeleted(
                job_id=job_id,
                poster_id=self.user_id,
                deleted_at=datetime.now(timezone.utc),
            )
        )

    async def rate(
        self,
        job_id: UUID,
        rated_user_id: UUID,
        rating_type: str,
        value: int,
        review: Optional[str] = None,
    ):
        rating = await self.client.create_rating(
            job_id, rated_user_id, rating_type, value, review
        )
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

    async def mark_notification_read(self, notification_id: UUID):
        notification = await self.client.mark_notification_read(notification_id)
        self._notifications_read(1)
        return notification

    async def mark_all_notifications_read(self) -> int:
        count = await self.client.mark_all_notifications_read()
        self._notifications_read(count)
        return count

    async def update_display_name(self, display_name: str):
        profile = await self.client.update_display_name(display_name)
        self.invalidator.invalidate(SyncKeys.profile(self.user_id))
        return profile

    async def close(self) -> None:
        """Tear down pollers, in-flight fetches and the HTTP client."""
        self.invalidator.unregister(self.sync)
        await self.sync.close()
        await self.client.close()
        logger.debug("Viewer closed", user_id=str(self.user_id))

    def _job_changed(
        self,
        job,
        helper_id: Optional[UUID] = None,
        notified_id: Optional[UUID] = None,
    ) -> None:
        self.invalidator.job_changed(
            JobStatusChanged(
                job_id=job.id,
                poster_id=job.poster_id,
                status=job.status,
                changed_at=job.updated_at or job.created_at,
                helper_id=helper_id or job.assigned_to,
                notified_id=notified_id,
            )
        )

    def _notifications_read(self, count: int) -> None:
        self.invalidator.notifications_read(
            NotificationsRead(
                user_id=self.user_id, count=count, read_at=datetime.now(timezone.utc)
            )
        )
