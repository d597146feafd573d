"""Tile resolution, caching, and interpolation engine."""

from .durable import DurableStorageConfig, DurableTierClient
from .elevation_service import ElevationService, LocationData
from .errors import CorruptTileError, DurableTierError, ElevationError, TileUnavailableError
from .interpolation import interpolate
from .origin import OriginFetcher
from .resolver import TileResolver
from .tile_cache import CacheStats, InFlightRegistry, TileCache
from .tiles import Tile, TileKey, decode_tile, encode_tile_key

__all__ = [
    "CacheStats",
    "CorruptTileError",
    "DurableStorageConfig",
    "DurableTierClient",
    "DurableTierError",
    "ElevationError",
    "ElevationService",
    "InFlightRegistry",
    "LocationData",
    "OriginFetcher",
    "Tile",
    "TileCache",
    "TileKey",
    "TileResolver",
    "TileUnavailableError",
    "decode_tile",
    "encode_tile_key",
    "interpolate",
]
