"""
Cache keys and refresh policies for the read resources.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from campusgig.config.settings import Settings, settings


@dataclass(frozen=True)
class RefreshPolicy:
    """When a cached key is refetched besides explicit invalidation."""

    interval: Optional[float] = None
    revalidate_on_focus: bool = False


class SyncKeys:
    """Builders for the keys of every cached read resource."""

    FEED = "jobs:feed"
    MY_JOBS_PREFIX = "jobs:my"
    GIGS_PREFIX = "jobs:gigs"
    PROFILE_PREFIX = "profile"
    UNREAD_PREFIX = "notifications:unread"

    @classmethod
    def my_jobs(cls, user_id: UUID) -> str:
        return f"{cls.MY_JOBS_PREFIX}:{user_id}"

    @classmethod
    def gigs(cls, user_id: UUID) -> str:
        return f"{cls.GIGS_PREFIX}:{user_id}"

    @classmethod
    def profile(cls, user_id: UUID) -> str:
        return f"{cls.PROFILE_PREFIX}:{user_id}"

    @classmethod
    def unread(cls, user_id: UUID) -> str:
        return f"{cls.UNREAD_PREFIX}:{user_id}"

    @classmethod
    def family(cls, prefix: str) -> str:
        """Glob pattern matching every key under a prefix."""
        return f"{prefix}:*"

    @classmethod
    def policy_for(
        cls, key: str, app_settings: Optional[Settings] = None
    ) -> RefreshPolicy:
        """Refresh policy of a key, derived from its family."""
        app_settings = app_settings or settings

        if key == cls.FEED:
            return RefreshPolicy(
                interval=app_settings.SYNC_FEED_INTERVAL_SECONDS,
                revalidate_on_focus=True,
            )
        if key.startswith(f"{cls.MY_JOBS_PREFIX}:") or key.startswith(
            f"{cls.GIGS_PREFIX}:"
        ):
            return RefreshPolicy(revalidate_on_focus=True)
        if key.startswith(f"{cls.UNREAD_PREFIX}:"):
            return RefreshPolicy(interval=app_settings.SYNC_UNREAD_INTERVAL_SECONDS)
        # Profiles and anything unknown refresh on explicit invalidation only
        return RefreshPolicy()
