"""
Elevation Service: central orchestrator for elevation lookups.

Owns the memory tier, the tier chain, and the background sweep task. Batch
queries resolve points concurrently (bounded by a semaphore) and return
results in input order; a failed point yields ``ELEVATION_UNAVAILABLE``
without affecting the rest of the batch.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    DEFAULT_TTL_SECONDS,
    ELEVATION_UNAVAILABLE,
    ORIGIN_BASE_URL,
    TILE_SIZE,
)
from .durable import DurableStorageConfig, DurableTierClient
from .interpolation import interpolate
from .origin import OriginFetcher
from .resolver import TileResolver
from .tile_cache import CacheStats, TileCache
from .tiles import TileKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationData:
    """A query point in decimal degrees. Range checks are left to callers."""

    lat: float
    lon: float


class ElevationService:
    """Ground elevation lookups backed by a tiered tile cache."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        durable_config: DurableStorageConfig | None = None,
        origin_base_url: str = ORIGIN_BASE_URL,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        sweep_interval_s: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        *,
        cache: TileCache | None = None,
        origin: OriginFetcher | None = None,
        durable: DurableTierClient | None = None,
        tile_size: int = TILE_SIZE,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        if durable is None and durable_config is not None:
            durable = DurableTierClient(durable_config)

        self.cache = cache if cache is not None else TileCache(ttl_seconds)
        self.origin = origin if origin is not None else OriginFetcher(origin_base_url)
        self.durable = durable
        self.resolver = TileResolver(self.cache, self.origin, durable, tile_size=tile_size)
        self.max_concurrency = max_concurrency
        self.sweep_interval_s = sweep_interval_s

        self._loop: asyncio.AbstractEventLoop | None = None
        self._sweeper: asyncio.Task | None = None
        self._background: set[asyncio.Task] = set()

    @property
    def ttl_seconds(self) -> float:
        return self.cache.ttl_seconds

    @property
    def durable_enabled(self) -> bool:
        return self.durable is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Bind to the running loop and start the periodic TTL sweep."""
        self._ensure_started()

    def _ensure_started(self) -> None:
        # Queries start the sweep on first use when start() was never awaited
        loop = asyncio.get_running_loop()
        self._loop = loop
        sweeper = self._sweeper
        if sweeper is None or sweeper.done() or sweeper.get_loop() is not loop:
            self._sweeper = loop.create_task(
                self.cache.run_sweeper(self.sweep_interval_s)
            )

    async def close(self) -> None:
        """Stop the sweep, drain background fetches, and close the HTTP client."""
        sweeper, self._sweeper = self._sweeper, None
        if sweeper is not None:
            sweeper.cancel()
            if sweeper.get_loop() is asyncio.get_running_loop():
                await asyncio.gather(sweeper, return_exceptions=True)
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        await self.cache.in_flight.cancel_all()
        await self.origin.aclose()
        self._loop = None

    async def __aenter__(self) -> "ElevationService":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Queries (async)
    # ------------------------------------------------------------------

    async def fetch_elevations(self, points: Sequence[LocationData]) -> list[float]:
        """Elevation for each point, in input order. Never raises for a point."""
        self._ensure_started()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bound(point: LocationData) -> float:
            async with semaphore:
                return await self._elevation_or_unavailable(point)

        # gather() keeps results aligned with the input order
        return list(await asyncio.gather(*(bound(p) for p in points)))

    async def get_elevation(self, lat: float, lon: float) -> float:
        """Elevation for a single point, or ``ELEVATION_UNAVAILABLE``."""
        self._ensure_started()
        return await self._elevation_or_unavailable(LocationData(lat, lon))

    async def _elevation_or_unavailable(self, point: LocationData) -> float:
        try:
            key = TileKey.for_point(point.lat, point.lon)
            tile = await self.resolver.resolve(key)
            return interpolate(tile, point.lat, point.lon)
        except Exception as e:
            logger.error(f"Elevation lookup failed for ({point.lat}, {point.lon}): {e}")
            return ELEVATION_UNAVAILABLE

    # ------------------------------------------------------------------
    # Queries (sync, non-blocking)
    # ------------------------------------------------------------------

    def fetch_elevations_sync(self, points: Sequence[LocationData]) -> list[float]:
        """
        Elevations from resident tiles only.

        Points whose tile is not resident get ``ELEVATION_UNAVAILABLE`` and a
        background fetch is scheduled, so a later call may succeed. Never
        blocks on I/O.
        """
        results: list[float] = []
        for point in points:
            try:
                key = TileKey.for_point(point.lat, point.lon).path
                tile = self.cache.get(key)
                if tile is None:
                    self._schedule_prefetch(key)
                    results.append(ELEVATION_UNAVAILABLE)
                    continue
                results.append(interpolate(tile, point.lat, point.lon))
            except Exception as e:
                logger.error(f"Elevation lookup failed for ({point.lat}, {point.lon}): {e}")
                results.append(ELEVATION_UNAVAILABLE)
        return results

    def _schedule_prefetch(self, key: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(self._prefetch(key))
            self._background.add(task)
            task.add_done_callback(self._background.discard)
        elif self._loop is not None and self._loop.is_running():
            asyncio.run_coroutine_threadsafe(self._prefetch(key), self._loop)
        else:
            logger.warning(f"No running event loop; background fetch of {key} skipped")

    async def _prefetch(self, key: str) -> None:
        try:
            await self.resolver.resolve(key)
        except Exception as e:
            logger.warning(f"Background fetch of {key} failed: {e}")

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    def stats(self) -> CacheStats:
        return self.cache.stats()

    def clear(self) -> int:
        """Evict every resident tile. Returns the number evicted."""
        count = self.cache.clear()
        logger.info(f"Cleared {count} tile(s) from memory tier")
        return count
