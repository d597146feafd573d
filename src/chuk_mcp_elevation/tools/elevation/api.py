"""
Elevation tools: single-point and batch ground elevation queries.

These tools resolve tiles through the service's tier chain and may perform
network I/O on a cache miss.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any

from ...constants import ELEVATION_UNAVAILABLE, ErrorMessages, SuccessMessages
from ...core.elevation_service import LocationData
from ...core.tiles import TileKey
from ...models.responses import (
    BatchElevationResponse,
    ErrorResponse,
    PointElevationResponse,
    PointResult,
    format_response,
)

logger = logging.getLogger(__name__)


def _is_coordinate(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_locations(locations: Any) -> list[LocationData]:
    """Validate a batch payload into LocationData, raising ValueError on bad input."""
    if not isinstance(locations, list) or not locations:
        raise ValueError(ErrorMessages.EMPTY_LOCATIONS)
    parsed = []
    for i, loc in enumerate(locations):
        if not (
            isinstance(loc, dict)
            and _is_coordinate(loc.get("lat"))
            and _is_coordinate(loc.get("lon"))
        ):
            raise ValueError(f"{ErrorMessages.INVALID_LOCATION.format(i)} (got {loc!r})")
        parsed.append(LocationData(lat=float(loc["lat"]), lon=float(loc["lon"])))
    return parsed


def register_elevation_tools(mcp, service):
    """Register elevation query tools with the MCP server."""

    @mcp.tool()
    async def elevation_point(
        lat: float,
        lon: float,
        output_mode: str = "json",
    ) -> str:
        """Get ground elevation at a single geographic point.

        Args:
            lat: Latitude in decimal degrees (-90 to 90)
            lon: Longitude in decimal degrees (-180 to 180)
            output_mode: "json" or "text"

        Returns:
            Bilinear-interpolated elevation in metres and the tile used
        """
        try:
            if not (_is_coordinate(lat) and _is_coordinate(lon)):
                raise ValueError(ErrorMessages.INVALID_COORDINATES.format(lat, lon))

            elevation = await service.get_elevation(lat, lon)
            if elevation == ELEVATION_UNAVAILABLE:
                raise RuntimeError(ErrorMessages.POINT_UNAVAILABLE)

            response = PointElevationResponse(
                lat=lat,
                lon=lon,
                elevation_m=elevation,
                tile=TileKey.for_point(lat, lon).path,
                timestamp=_utc_now(),
                message=SuccessMessages.POINT_ELEVATION.format(elevation),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"elevation_point failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def elevation_batch(
        locations: list[dict],
        output_mode: str = "json",
    ) -> str:
        """Get ground elevations for many points in a single request.

        Points sharing a tile download it once. A point whose tile cannot be
        fetched is reported with a null elevation; the rest still succeed.

        Args:
            locations: List of {"lat": float, "lon": float} objects
            output_mode: "json" or "text"

        Returns:
            Per-point elevations in input order with success counts
        """
        try:
            points = _parse_locations(locations)
            elevations = await service.fetch_elevations(points)

            results = [
                PointResult(
                    lat=p.lat,
                    lon=p.lon,
                    elevation_m=None if e == ELEVATION_UNAVAILABLE else e,
                )
                for p, e in zip(points, elevations)
            ]
            successful = sum(1 for r in results if r.elevation_m is not None)

            response = BatchElevationResponse(
                results=results,
                total=len(results),
                successful=successful,
                timestamp=_utc_now(),
                message=SuccessMessages.BATCH_ELEVATION.format(successful, len(results)),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"elevation_batch failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
