"""
Tile resolver: memory, then durable, then origin.

A miss in a faster tier is filled from the next one. Concurrent requests for
the same key share one resolution through the cache's in-flight registry.
Only a fully decoded tile is ever put into the memory tier.
"""

import asyncio
import logging

from ..constants import TILE_SIZE
from .durable import DurableTierClient
from .errors import CorruptTileError, DurableTierError
from .origin import OriginFetcher
from .tile_cache import TileCache
from .tiles import Tile, TileKey, decode_tile

logger = logging.getLogger(__name__)


class TileResolver:
    """Resolves tile keys to decoded tiles through the tier chain."""

    def __init__(
        self,
        cache: TileCache,
        origin: OriginFetcher,
        durable: DurableTierClient | None = None,
        tile_size: int = TILE_SIZE,
    ) -> None:
        self.cache = cache
        self.origin = origin
        self.durable = durable
        self.tile_size = tile_size

    async def resolve(self, key: TileKey | str) -> Tile:
        """
        Return the decoded tile for ``key``.

        Raises:
            TileUnavailableError: If neither the durable tier nor the origin
                can produce the tile
            CorruptTileError: If the origin payload cannot be decoded
        """
        path = str(key)
        tile = self.cache.get(path)
        if tile is not None:
            logger.debug(f"Memory hit for {path}")
            return tile
        return await self.cache.in_flight.run(path, lambda: self._fetch(path))

    async def _fetch(self, key: str) -> Tile:
        if self.durable is not None:
            tile = await self._from_durable(key)
            if tile is not None:
                self.cache.put(key, tile)
                return tile

        blob = await self.origin.fetch(key)
        tile = await asyncio.to_thread(decode_tile, blob, self.tile_size)
        self.cache.put(key, tile)

        if self.durable is not None:
            await self._write_through(key, blob)
        return tile

    async def _from_durable(self, key: str) -> Tile | None:
        """Tile from the durable tier, or None on a miss or any tier failure."""
        assert self.durable is not None
        try:
            if not await self.durable.exists(key):
                logger.debug(f"Durable miss for {key}")
                return None
            blob = await self.durable.get(key)
            if blob is None:
                return None
            tile = await asyncio.to_thread(decode_tile, blob, self.tile_size)
        except (DurableTierError, CorruptTileError) as e:
            logger.warning(f"Durable tier read failed for {key}, falling back to origin: {e}")
            return None
        logger.info(f"Loaded tile {key} from durable tier")
        return tile

    async def _write_through(self, key: str, blob: bytes) -> None:
        assert self.durable is not None
        try:
            await self.durable.put(key, blob)
        except DurableTierError as e:
            logger.warning(f"Failed to upload tile {key} to durable tier: {e}")
