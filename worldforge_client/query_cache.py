# Client-side query cache with in-flight tracking and prefix invalidation
import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from worldforge_client.api import APIError

logger = logging.getLogger(__name__)

QueryKey = Tuple
Fetcher = Callable[[], Awaitable[Any]]

MAX_RETRIES = 3


def should_retry(failure_count: int, error: Exception) -> bool:
    """Never retry auth failures; retry anything else up to three times."""
    if isinstance(error, APIError) and error.status_code in (401, 403):
        return False
    return failure_count <= MAX_RETRIES


def retry_delay(attempt: int) -> float:
    """Exponential backoff in seconds, capped at 30"""
    return min(2 ** attempt, 30)


@dataclass
class CacheEntry:
    data: Any
    updated_at: float = field(default_factory=time.monotonic)
    stale: bool = False


def matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[:len(prefix)] == prefix


class QueryCache:
    """
    Cached query results keyed by tuples.

    A key has at most one fetch in flight; concurrent readers share it.
    Cancelling a key's fetches discards their results, which is what an
    optimistic update needs before it writes to the cache.
    """

    def __init__(
        self,
        retry: Callable[[int, Exception], bool] = should_retry,
        delay: Callable[[int], float] = retry_delay,
    ):
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._inflight: Dict[QueryKey, asyncio.Task] = {}
        self.retry = retry
        self.delay = delay

    def get_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(key)
        return entry.data if entry else None

    def set_data(self, key: QueryKey, value: Any) -> Any:
        """Store data for a key. ``value`` may be a function of the current data."""
        if callable(value):
            value = value(self.get_data(key))
        self._entries[key] = CacheEntry(data=value)
        return value

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.stale

    def is_fetching(self, key: QueryKey) -> bool:
        task = self._inflight.get(key)
        return task is not None and not task.done()

    async def fetch(self, key: QueryKey, fetcher: Fetcher, force: bool = False) -> Any:
        """Return cached data, or fetch it (sharing any fetch already running)."""
        if not force and not self.is_stale(key):
            return self._entries[key].data

        task = self._inflight.get(key)
        if task is None or task.done():
            task = asyncio.ensure_future(self._run(key, fetcher))
            self._inflight[key] = task
        return await asyncio.shield(task)

    async def _run(self, key: QueryKey, fetcher: Fetcher) -> Any:
        failures = 0
        try:
            while True:
                try:
                    data = await fetcher()
                    break
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    failures += 1
                    if not self.retry(failures, e):
                        logger.warning(f"Query {key} failed after {failures} attempt(s): {e}")
                        raise
                    await asyncio.sleep(self.delay(failures))

            self._entries[key] = CacheEntry(data=data)
            return data
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

    async def cancel(self, prefix: QueryKey) -> int:
        """Cancel in-flight fetches under ``prefix`` and wait for them to stop."""
        tasks = [task for key, task in list(self._inflight.items()) if matches(key, prefix) and not task.done()]
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Cancelled query ended with {e}")
        return len(tasks)

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry under ``prefix`` stale so the next read refetches."""
        count = 0
        for key, entry in self._entries.items():
            if matches(key, prefix):
                entry.stale = True
                count += 1
        return count
