"""
Stale-while-revalidate cache fronting the read paths.

Each key is backed by a SyncTask. Accesses return the cached value at once
and refetch in the background when it is older than the key's interval.
Concurrent accesses share one in-flight fetch. Invalidation bumps the key's
generation so that results of fetches started earlier are discarded.
"""

import asyncio
import time
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from campusgig.application.interfaces.services import InvalidationTargetInterface
from campusgig.application.services.sync_keys import RefreshPolicy, SyncKeys
from campusgig.config.logging import get_logger
from campusgig.config.settings import Settings, settings
from campusgig.infrastructure.monitoring.metrics import record_sync_fetch

logger = get_logger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[["CacheSnapshot"], None]

MAX_SUPERSEDED_REFETCHES = 3


@dataclass(frozen=True)
class CacheSnapshot:
    """What a reader sees for a key at one moment."""

    key: str
    value: Any = None
    has_value: bool = False
    error: Optional[BaseException] = None
    is_stale: bool = False
    is_validating: bool = False
    fetched_at: Optional[float] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None


class SyncTask:
    """Cache state of a single key."""

    def __init__(self, key: str, fetcher: Fetcher, policy: RefreshPolicy):
        self.key = key
        self.fetcher = fetcher
        self.policy = policy
        self.value: Any = None
        self.has_value = False
        self.error: Optional[BaseException] = None
        self.fetched_at: Optional[float] = None
        self.attempted_at: Optional[float] = None
        self.generation = 0
        self.invalidated = False
        self.in_flight: Optional[asyncio.Future] = None
        self.in_flight_generation = -1
        # Every running fetch, including superseded ones still finishing
        self.fetches: Set[asyncio.Future] = set()
        self.listeners: Set["Subscription"] = set()
        self.poller: Optional[asyncio.Task] = None

    @property
    def is_fetching(self) -> bool:
        return self.in_flight is not None and not self.in_flight.done()

    def is_expired(self, now: float) -> bool:
        if self.policy.interval is None or self.fetched_at is None:
            return False
        return now - self.fetched_at >= self.policy.interval

    def snapshot(self, now: float) -> CacheSnapshot:
        return CacheSnapshot(
            key=self.key,
            value=self.value,
            has_value=self.has_value,
            error=self.error,
            is_stale=self.invalidated or self.is_expired(now),
            is_validating=self.is_fetching,
            fetched_at=self.fetched_at,
        )


class Subscription:
    """Handle returned by SyncLayer.subscribe."""

    def __init__(self, layer: "SyncLayer", task: SyncTask, listener: Listener):
        self._layer = layer
        self._task = task
        self.listener = listener
        self.active = True

    @property
    def key(self) -> str:
        return self._task.key

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._layer._remove_subscription(self._task, self)


class SyncLayer(InvalidationTargetInterface):
    """Per-viewer keyed cache with deduplicated background revalidation."""

    def __init__(
        self,
        app_settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = app_settings or settings
        self.dedupe_interval = self.settings.SYNC_DEDUPE_INTERVAL_SECONDS
        self._clock = clock
        self._tasks: Dict[str, SyncTask] = {}
        self._closed = False

    def register(
        self, key: str, fetcher: Fetcher, policy: Optional[RefreshPolicy] = None
    ) -> SyncTask:
        """Bind a key to its fetcher; later calls replace the fetcher."""
        task = self._tasks.get(key)
        if task is None:
            policy = policy or SyncKeys.policy_for(key, self.settings)
            task = SyncTask(key, fetcher, policy)
            self._tasks[key] = task
        else:
            task.fetcher = fetcher
            if policy is not None:
                task.policy = policy
        return task

    def keys(self) -> List[str]:
        return list(self._tasks)

    def peek(self, key: str) -> Optional[CacheSnapshot]:
        """Current snapshot without triggering any fetch."""
        task = self._tasks.get(key)
        return task.snapshot(self._clock()) if task else None

    async def get(
        self,
        key: str,
        fetcher: Optional[Fetcher] = None,
        policy: Optional[RefreshPolicy] = None,
    ) -> CacheSnapshot:
        """Read a key.

        Returns the cached value immediately when there is one, starting a
        background refetch if it has expired. Without a value, or after an
        invalidation, waits for a fresh fetch.
        """
        task = self._task_for(key, fetcher, policy)

        if not task.has_value or task.invalidated:
            await self._revalidate(task)
        elif task.is_expired(self._clock()):
            self._start_fetch(task)

        return task.snapshot(self._clock())

    async def revalidate(self, key: str) -> CacheSnapshot:
        """Fetch a registered key now and wait for the result."""
        task = self._task_for(key, None, None)
        await self._revalidate(task)
        return task.snapshot(self._clock())

    def invalidate(self, *patterns: str) -> int:
        """Mark keys matching exact names or glob families stale.

        Subscribed keys are refetched right away; the rest refetch on their
        next access.
        """
        affected = 0
        for task in self._matching(patterns):
            task.invalidated = True
            task.generation += 1
            affected += 1
            if task.listeners and not self._closed:
                self._start_fetch(task)

        if affected:
            logger.debug(
                "Sync keys invalidated", patterns=list(patterns), affected=affected
            )
        return affected

    def focus(self) -> int:
        """Refetch every focus-sensitive key outside the dedupe window."""
        now = self._clock()
        scheduled = 0
        for task in self._tasks.values():
            if not task.policy.revalidate_on_focus:
                continue
            if (
                task.fetched_at is not None
                and now - task.fetched_at < self.dedupe_interval
                and not task.invalidated
            ):
                continue
            self._start_fetch(task)
            scheduled += 1
        return scheduled

    def subscribe(
        self,
        key: str,
        listener: Listener,
        fetcher: Optional[Fetcher] = None,
        policy: Optional[RefreshPolicy] = None,
    ) -> Subscription:
        """Receive a snapshot after every settled fetch of a key.

        The first subscriber starts the key's interval poller and loads the
        key if it has no fresh value.
        """
        task = self._task_for(key, fetcher, policy)
        subscription = Subscription(self, task, listener)
        task.listeners.add(subscription)

        if len(task.listeners) == 1 and task.policy.interval is not None:
            task.poller = asyncio.ensure_future(self._poll(task))
        if not task.has_value or task.invalidated or task.is_expired(self._clock()):
            self._start_fetch(task)
        return subscription

    async def close(self) -> None:
        """Cancel every poller and in-flight fetch."""
        self._closed = True
        pending = []
        for task in self._tasks.values():
            for future in (task.poller, *task.fetches):
                if future is not None and not future.done():
                    future.cancel()
                    pending.append(future)
            task.poller = None
            task.listeners.clear()

        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.debug("Sync layer closed", keys=len(self._tasks))

    def _task_for(
        self, key: str, fetcher: Optional[Fetcher], policy: Optional[RefreshPolicy]
    ) -> SyncTask:
        if self._closed:
            raise RuntimeError("Sync layer is closed")
        if fetcher is not None:
            return self.register(key, fetcher, policy)
        task = self._tasks.get(key)
        if task is None:
            raise KeyError(f"No fetcher registered for key '{key}'")
        return task

    def _matching(self, patterns) -> List[SyncTask]:
        return [
            task
            for key, task in self._tasks.items()
            if any(fnmatchcase(key, pattern) for pattern in patterns)
        ]

    def _start_fetch(self, task: SyncTask) -> asyncio.Future:
        """Start a fetch for the current generation, or join the running one."""
        if task.is_fetching and task.in_flight_generation == task.generation:
            return task.in_flight

        generation = task.generation
        future = asyncio.ensure_future(self._fetch(task, generation))
        task.fetches.add(future)
        future.add_done_callback(task.fetches.discard)
        task.in_flight = future
        task.in_flight_generation = generation
        return future

    async def _revalidate(self, task: SyncTask) -> None:
        for _ in range(MAX_SUPERSEDED_REFETCHES):
            generation = task.generation
            # Shielded so a cancelled reader never cancels the shared fetch
            await asyncio.shield(self._start_fetch(task))
            if generation == task.generation:
                return

    async def _fetch(self, task: SyncTask, generation: int) -> None:
        started = self._clock()
        try:
            value = await task.fetcher()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            task.attempted_at = self._clock()
            record_sync_fetch(task.key, "error", self._clock() - started)
            if generation != task.generation:
                return
            # Keep the last good value next to the error
            task.error = e
            logger.warning(
                "Sync fetch failed",
                key=task.key,
                error=str(e),
                error_type=type(e).__name__,
                has_cached_value=task.has_value,
            )
            self._notify(task)
            return

        if generation != task.generation:
            record_sync_fetch(task.key, "superseded", self._clock() - started)
            logger.debug("Discarding superseded fetch", key=task.key)
            return

        task.attempted_at = self._clock()
        record_sync_fetch(task.key, "success", self._clock() - started)
        task.value = value
        task.has_value = True
        task.error = None
        task.fetched_at = self._clock()
        task.invalidated = False
        self._notify(task)

    async def _poll(self, task: SyncTask) -> None:
        interval = task.policy.interval
        while True:
            # Failed fetches wait a full interval too
            last = task.attempted_at
            if last is None:
                delay = interval
            else:
                delay = max(interval - (self._clock() - last), 0.0)
            await asyncio.sleep(delay)

            last = task.attempted_at
            if last is None or self._clock() - last >= interval:
                await asyncio.shield(self._start_fetch(task))

    def _notify(self, task: SyncTask) -> None:
        snapshot = task.snapshot(self._clock())
        for subscription in list(task.listeners):
            try:
                subscription.listener(snapshot)
            except Exception:
                logger.error("Sync listener failed", key=task.key, exc_info=True)

    def _remove_subscription(self, task: SyncTask, subscription: Subscription) -> None:
        task.listeners.discard(subscription)
        if not task.listeners and task.poller is not None:
            task.poller.cancel()
            task.poller = None
