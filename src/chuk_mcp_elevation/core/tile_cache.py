"""
Memory tier for decoded tiles.

Entries carry a sliding deadline: every read hit and every write pushes the
deadline ``ttl`` seconds into the future. Expired entries are dropped lazily
on access and by a periodic sweep, so no timer outlives its entry.

The in-flight registry lives beside the cache so that one object reports
both resident and pending tiles. Clearing the cache never touches pending
resolutions; they complete and repopulate the cache normally.
"""

import asyncio
import functools
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ..constants import DEFAULT_SWEEP_INTERVAL_SECONDS, DEFAULT_TTL_SECONDS
from .tiles import Tile

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry:
    """A resident tile and the monotonic time at which it expires."""

    tile: Tile
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache occupancy."""

    resident: int
    in_flight: int


class InFlightRegistry:
    """
    Single-flight join point for tile resolutions.

    The first caller for a key starts a shared task; later callers await the
    same task. The task deregisters itself when it finishes, whether it
    succeeds or fails.
    """

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, key: object) -> bool:
        return key in self._pending

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """Run ``factory`` for ``key`` unless a run is already pending, then await it."""
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._pending[key] = task
            task.add_done_callback(functools.partial(self._release, key))
        else:
            logger.debug(f"Joining in-flight resolution for {key}")
        # A cancelled waiter must not cancel the shared resolution
        return await asyncio.shield(task)

    def _release(self, key: str, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        # Failures are delivered to every waiter; mark them retrieved so an
        # abandoned resolution is not reported again by the event loop.
        if not task.cancelled():
            task.exception()

    async def cancel_all(self) -> None:
        """Cancel pending resolutions and wait for them to unwind."""
        tasks = list(self._pending.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


class TileCache:
    """Thread-safe mapping of tile key to decoded tile with sliding TTL."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be > 0, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.in_flight = InFlightRegistry()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Residency check that neither refreshes nor expires the entry."""
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> Tile | None:
        """Return the tile for ``key`` and refresh its deadline, or None."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= now:
                del self._entries[key]
                logger.info(f"Tile {key} timed out")
                return None
            entry.expires_at = now + self.ttl_seconds
            return entry.tile

    def put(self, key: str, tile: Tile) -> None:
        """Store ``tile`` under ``key`` with a fresh deadline."""
        expires_at = self._clock() + self.ttl_seconds
        with self._lock:
            self._entries[key] = CacheEntry(tile=tile, expires_at=expires_at)

    def evict(self, key: str) -> bool:
        """Remove ``key``. Returns True if it was resident."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        """Evict every resident tile. Returns the number evicted."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def sweep(self) -> int:
        """Drop every expired entry. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.expires_at <= now]
            for key in expired:
                del self._entries[key]
        for key in expired:
            logger.info(f"Tile {key} timed out")
        return len(expired)

    def stats(self) -> CacheStats:
        """Resident and in-flight counts, after dropping expired entries."""
        self.sweep()
        return CacheStats(resident=len(self), in_flight=len(self.in_flight))

    async def run_sweeper(self, interval_s: float = DEFAULT_SWEEP_INTERVAL_SECONDS) -> None:
        """Sweep expired entries every ``interval_s`` seconds until cancelled."""
        while True:
            await asyncio.sleep(interval_s)
            removed = self.sweep()
            if removed:
                logger.debug(f"Sweep removed {removed} expired tile(s)")
