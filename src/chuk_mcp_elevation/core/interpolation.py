"""
Bilinear interpolation of a point inside a decoded tile.

All functions are synchronous and CPU-only.
"""

import math

from .tiles import Tile


def lerp(a: float, b: float, f: float) -> float:
    """Linear blend from ``a`` to ``b`` by fraction ``f``."""
    return a + (b - a) * f


def fractional_index(value: float, size: int) -> float:
    """Position of ``value`` within its unit-degree band, in sample cells."""
    return (value - math.floor(value)) * (size - 1)


def _cell(index: float, size: int) -> tuple[int, int, float]:
    """Low index, high index and fraction for one axis, clamped to the tile."""
    last = size - 1
    low = int(math.floor(index))
    frac = index - low
    if low >= last:
        # Point on (or rounded onto) the north/east edge
        return last, last, 0.0
    return low, low + 1, frac


def interpolate(tile: Tile, lat: float, lon: float) -> float:
    """
    Bilinear elevation at ``(lat, lon)`` inside ``tile``.

    The tile must be the one whose band is ``(floor(lat), floor(lon))``.
    Points on the northern or eastern edge are clamped to the last row or
    column instead of reading the adjoining tile.

    Args:
        tile: Decoded tile containing the point
        lat: Latitude
        lon: Longitude

    Returns:
        Elevation in metres
    """
    size = tile.size
    row_low, row_hi, row_frac = _cell(fractional_index(lat, size), size)
    col_low, col_hi, col_frac = _cell(fractional_index(lon, size), size)

    v00 = tile.sample(row_low, col_low)
    v01 = tile.sample(row_low, col_hi)
    v11 = tile.sample(row_hi, col_hi)
    v10 = tile.sample(row_hi, col_low)

    low_row = lerp(v00, v01, col_frac)
    high_row = lerp(v10, v11, col_frac)
    return lerp(low_row, high_row, row_frac)
