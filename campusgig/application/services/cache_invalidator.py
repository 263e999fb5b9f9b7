"""
Fan-out of cache invalidations from mutations to registered sync layers.
"""

from typing import List, Set

from campusgig.application.interfaces.services import InvalidationTargetInterface
from campusgig.application.services.sync_keys import SyncKeys
from campusgig.config.logging import get_logger
from campusgig.domain.events.job_deleted import JobDeleted
from campusgig.domain.events.job_status_changed import JobStatusChanged
from campusgig.domain.events.notification_read import NotificationsRead
from campusgig.domain.events.rating_recorded import RatingRecorded

logger = get_logger(__name__)


def keys_for_job_event(event: JobStatusChanged) -> List[str]:
    """Keys whose contents depend on a job's status or assignee."""
    keys = [SyncKeys.FEED, SyncKeys.my_jobs(event.poster_id)]
    if event.helper_id is not None:
        keys.append(SyncKeys.gigs(event.helper_id))
    if event.notified_id is not None:
        keys.append(SyncKeys.unread(event.notified_id))
    return keys


def keys_for_job_deletion(event: JobDeleted) -> List[str]:
    return [SyncKeys.FEED, SyncKeys.my_jobs(event.poster_id)]


def keys_for_rating_event(event: RatingRecorded) -> List[str]:
    """Keys whose contents depend on a new rating."""
    return [
        SyncKeys.profile(event.rated_user_id),
        SyncKeys.unread(event.rated_user_id),
        # has_rated flags shown to the rater
        SyncKeys.my_jobs(event.rater_id),
        SyncKeys.gigs(event.rater_id),
    ]


class CacheInvalidator:
    """Publishes stale keys to every registered invalidation target.

    Targets live in the same process; viewers elsewhere converge through
    their own interval and focus revalidation.
    """

    def __init__(self):
        self._targets: Set[InvalidationTargetInterface] = set()

    def register(self, target: InvalidationTargetInterface) -> None:
        self._targets.add(target)

    def unregister(self, target: InvalidationTargetInterface) -> None:
        self._targets.discard(target)

    @property
    def target_count(self) -> int:
        return len(self._targets)

    def invalidate(self, *patterns: str) -> int:
        """Mark matching keys stale in every target."""
        affected = 0
        for target in list(self._targets):
            affected += target.invalidate(*patterns)

        logger.debug(
            "Cache keys invalidated",
            patterns=list(patterns),
            targets=len(self._targets),
            affected=affected,
        )
        return affected

    def job_changed(self, event: JobStatusChanged) -> int:
        return self.invalidate(*keys_for_job_event(event))

    def job_deleted(self, event: JobDeleted) -> int:
        return self.invalidate(*keys_for_job_deletion(event))

    def rating_recorded(self, event: RatingRecorded) -> int:
        return self.invalidate(*keys_for_rating_event(event))

    def notifications_read(self, event: NotificationsRead) -> int:
        return self.invalidate(SyncKeys.unread(event.user_id))
