"""
Tile addressing and decoding for Skadi-layout SRTM tiles.

A tile covers one degree of latitude and longitude and is stored as a
gzip-compressed ``.hgt`` grid of big-endian signed 16-bit samples, written
north row first. Row indices used by :meth:`Tile.sample` count northward
from the tile's southern edge, so row ``0`` reads the last row of the
stored grid.
"""

import gzip
import math
import zlib
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from ..constants import TILE_DTYPE, TILE_EXTENSION, TILE_SAMPLE_BYTES, TILE_SIZE, ErrorMessages
from .errors import CorruptTileError

SampleGrid = NDArray[np.integer[Any]]


# ---------------------------------------------------------------------------
# Tile addressing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TileKey:
    """Integer (latitude band, longitude band) pair identifying a tile."""

    lat_band: int
    lon_band: int

    @classmethod
    def for_point(cls, lat: float, lon: float) -> "TileKey":
        """Band of the tile containing a point (floor of each coordinate)."""
        return cls(math.floor(lat), math.floor(lon))

    @property
    def path(self) -> str:
        """Canonical storage key shared by every tier."""
        return encode_tile_key(self.lat_band, self.lon_band)

    def __str__(self) -> str:
        return self.path


def encode_tile_key(lat_band: int, lon_band: int) -> str:
    """Map an integer band pair to its canonical key, e.g. ``N42/N42E000.hgt.gz``."""
    ns = "S" if lat_band < 0 else "N"
    ew = "W" if lon_band < 0 else "E"
    lat_name = f"{ns}{abs(lat_band):02d}"
    lon_name = f"{ew}{abs(lon_band):03d}"
    return f"{lat_name}/{lat_name}{lon_name}{TILE_EXTENSION}"


# ---------------------------------------------------------------------------
# Decoded tile
# ---------------------------------------------------------------------------


class Tile:
    """Immutable square grid of elevation samples in metres."""

    __slots__ = ("_grid", "size")

    def __init__(self, grid: SampleGrid) -> None:
        if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
            raise CorruptTileError(f"Tile grid must be square, got shape {grid.shape}")
        if grid.flags.writeable:
            grid = grid.copy()
        grid.flags.writeable = False
        self._grid = grid
        self.size = int(grid.shape[0])

    @property
    def grid(self) -> SampleGrid:
        """Read-only view of the samples in stored (north row first) order."""
        return self._grid

    def sample(self, row: int, col: int) -> int:
        """Sample at ``row`` (counted northward from the south edge) and ``col``."""
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Sample ({row}, {col}) outside {self.size}x{self.size} tile")
        return int(self._grid[self.size - row - 1, col])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return self.size == other.size and bool(np.array_equal(self._grid, other._grid))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Tile(size={self.size})"


def decode_tile(blob: bytes, size: int = TILE_SIZE) -> Tile:
    """
    Decompress a gzip tile payload into a :class:`Tile`.

    Args:
        blob: gzip-compressed ``.hgt`` bytes
        size: Expected samples per side

    Returns:
        Decoded tile

    Raises:
        CorruptTileError: If the payload cannot be decompressed or has the
            wrong length
    """
    try:
        raw = gzip.decompress(blob)
    except (OSError, EOFError, zlib.error) as e:
        raise CorruptTileError(ErrorMessages.CORRUPT_TILE_GZIP.format(e)) from e

    expected = size * size * TILE_SAMPLE_BYTES
    if len(raw) != expected:
        raise CorruptTileError(ErrorMessages.CORRUPT_TILE_SIZE.format(len(raw), expected))

    grid = np.frombuffer(raw, dtype=TILE_DTYPE).reshape(size, size)
    return Tile(grid)
