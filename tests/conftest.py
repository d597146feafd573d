"""Shared test fixtures for chuk-mcp-elevation."""

import gzip

import numpy as np
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock

from chuk_mcp_elevation.core.errors import TileUnavailableError

SMALL_SIZE = 5


def ramp_grid(size=SMALL_SIZE):
    """Stored grid whose value is 10 * (row counted from the south) + col."""
    rows_from_south = np.arange(size)[::-1]
    grid = 10 * rows_from_south[:, None] + np.arange(size)[None, :]
    return grid.astype(">i2")


def make_tile_blob(grid):
    """gzip-compressed big-endian int16 payload for ``grid``."""
    return gzip.compress(np.asarray(grid, dtype=">i2").tobytes(), compresslevel=1)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ramp_blob():
    return make_tile_blob(ramp_grid())


@pytest.fixture
def mock_origin(ramp_blob):
    """Origin that serves the ramp tile for every key except those listed in ``missing``."""
    origin = MagicMock()
    origin.base_url = "https://tiles.example.com/skadi"
    origin.missing = set()

    async def fetch(key):
        if key in origin.missing:
            raise TileUnavailableError(key, f"Origin returned HTTP 404 for tile {key}")
        return ramp_blob

    origin.fetch = AsyncMock(side_effect=fetch)
    origin.aclose = AsyncMock()
    return origin


@pytest.fixture
def mock_durable():
    """Durable tier that starts empty."""
    durable = MagicMock()
    durable.exists = AsyncMock(return_value=False)
    durable.get = AsyncMock(return_value=None)
    durable.put = AsyncMock(return_value=None)
    return durable


@pytest_asyncio.fixture
async def service(mock_origin):
    """ElevationService over the mock origin with 5x5 tiles."""
    from chuk_mcp_elevation.core.elevation_service import ElevationService

    svc = ElevationService(origin=mock_origin, tile_size=SMALL_SIZE)
    yield svc
    await svc.close()


@pytest.fixture
def mock_mcp():
    """Mock ChukMCPServer."""
    mcp = MagicMock()
    mcp.tool = MagicMock(return_value=lambda fn: fn)
    return mcp
