"""
Tests for elevation tools (elevation_point, elevation_batch).

Tests cover:
- Success paths (JSON and text output modes)
- Parameter forwarding to service methods
- Input validation (coordinates, location payloads)
- Error handling (exception -> ErrorResponse)
- The unavailable sentinel mapped to errors / nulls
"""

import json
import math

import pytest
from unittest.mock import AsyncMock, MagicMock

from chuk_mcp_elevation.constants import ELEVATION_UNAVAILABLE
from chuk_mcp_elevation.core.elevation_service import LocationData


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _register(service):
    tools = {}
    mcp = MagicMock()

    def capture_tool(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn

        return decorator

    mcp.tool = capture_tool

    from chuk_mcp_elevation.tools.elevation.api import register_elevation_tools

    register_elevation_tools(mcp, service)
    return tools


@pytest.fixture
def elevation_tools():
    """Register elevation tools and return (tools_dict, service)."""
    service = MagicMock()
    service.get_elevation = AsyncMock(return_value=12.5)
    service.fetch_elevations = AsyncMock(return_value=[100.0, 200.0])
    return _register(service), service


# ===========================================================================
# elevation_point
# ===========================================================================


class TestElevationPoint:
    @pytest.mark.asyncio
    async def test_success_json(self, elevation_tools):
        tools, service = elevation_tools

        result = await tools["elevation_point"](lat=40.7128, lon=-74.0060)
        data = json.loads(result)

        assert data["lat"] == 40.7128
        assert data["lon"] == -74.006
        assert data["elevation_m"] == 12.5
        assert data["tile"] == "N40/N40W075.hgt.gz"
        assert data["message"] == "Elevation at point: 12.5m"
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_success_text(self, elevation_tools):
        tools, _ = elevation_tools

        result = await tools["elevation_point"](lat=40.7128, lon=-74.0060, output_mode="text")

        assert "12.5m" in result
        assert "Tile: N40/N40W075.hgt.gz" in result

    @pytest.mark.asyncio
    async def test_coordinates_forwarded(self, elevation_tools):
        tools, service = elevation_tools
        await tools["elevation_point"](lat=46.5, lon=7.5)
        service.get_elevation.assert_awaited_once_with(46.5, 7.5)

    @pytest.mark.asyncio
    async def test_integer_coordinates_accepted(self, elevation_tools):
        tools, service = elevation_tools
        data = json.loads(await tools["elevation_point"](lat=46, lon=7))
        assert data["tile"] == "N46/N46E007.hgt.gz"

    @pytest.mark.asyncio
    async def test_unavailable_is_error(self, elevation_tools):
        tools, service = elevation_tools
        service.get_elevation = AsyncMock(return_value=ELEVATION_UNAVAILABLE)

        data = json.loads(await tools["elevation_point"](lat=46.5, lon=7.5))

        assert data["error"] == "Failed to fetch elevation data for the specified location"

    @pytest.mark.asyncio
    async def test_unavailable_text(self, elevation_tools):
        tools, service = elevation_tools
        service.get_elevation = AsyncMock(return_value=ELEVATION_UNAVAILABLE)

        result = await tools["elevation_point"](lat=46.5, lon=7.5, output_mode="text")

        assert result.startswith("Error: Failed to fetch elevation data")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "lat, lon",
        [(math.nan, 0.0), (0.0, math.inf), ("46.5", 7.5), (True, 7.5), (None, 7.5)],
    )
    async def test_invalid_coordinates(self, elevation_tools, lat, lon):
        tools, service = elevation_tools

        data = json.loads(await tools["elevation_point"](lat=lat, lon=lon))

        assert "Invalid coordinates" in data["error"]
        service.get_elevation.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_service_exception_becomes_error(self, elevation_tools):
        tools, service = elevation_tools
        service.get_elevation = AsyncMock(side_effect=RuntimeError("loop closed"))

        data = json.loads(await tools["elevation_point"](lat=46.5, lon=7.5))

        assert data["error"] == "loop closed"


# ===========================================================================
# elevation_batch
# ===========================================================================


class TestElevationBatch:
    @pytest.mark.asyncio
    async def test_success_json(self, elevation_tools):
        tools, _ = elevation_tools
        locations = [{"lat": 46.5, "lon": 7.5}, {"lat": 40.7, "lon": -74.0}]

        data = json.loads(await tools["elevation_batch"](locations=locations))

        assert data["total"] == 2
        assert data["successful"] == 2
        assert [r["elevation_m"] for r in data["results"]] == [100.0, 200.0]
        assert data["results"][1] == {"lat": 40.7, "lon": -74.0, "elevation_m": 200.0}
        assert data["message"] == "Retrieved elevation for 2 of 2 points"

    @pytest.mark.asyncio
    async def test_locations_forwarded_in_order(self, elevation_tools):
        tools, service = elevation_tools
        locations = [{"lat": 46.5, "lon": 7.5}, {"lat": 40, "lon": -74}]

        await tools["elevation_batch"](locations=locations)

        points = service.fetch_elevations.call_args.args[0]
        assert points == [LocationData(46.5, 7.5), LocationData(40.0, -74.0)]

    @pytest.mark.asyncio
    async def test_unavailable_points_are_null(self, elevation_tools):
        tools, service = elevation_tools
        service.fetch_elevations = AsyncMock(
            return_value=[100.0, ELEVATION_UNAVAILABLE, 300.0]
        )
        locations = [{"lat": 1.5, "lon": 1.5}, {"lat": 2.5, "lon": 2.5}, {"lat": 3.5, "lon": 3.5}]

        data = json.loads(await tools["elevation_batch"](locations=locations))

        assert [r["elevation_m"] for r in data["results"]] == [100.0, None, 300.0]
        assert data["successful"] == 2
        assert data["total"] == 3

    @pytest.mark.asyncio
    async def test_success_text(self, elevation_tools):
        tools, service = elevation_tools
        service.fetch_elevations = AsyncMock(return_value=[100.0, ELEVATION_UNAVAILABLE])
        locations = [{"lat": 46.5, "lon": 7.5}, {"lat": 40.7, "lon": -74.0}]

        result = await tools["elevation_batch"](locations=locations, output_mode="text")

        assert "Retrieved elevation for 1 of 2 points" in result
        assert "100.0m" in result
        assert "unavailable" in result

    @pytest.mark.asyncio
    async def test_extra_location_keys_ignored(self, elevation_tools):
        tools, service = elevation_tools
        locations = [{"lat": 46.5, "lon": 7.5, "name": "a"}, {"lat": 40.7, "lon": -74.0}]

        data = json.loads(await tools["elevation_batch"](locations=locations))

        assert data["total"] == 2

    @pytest.mark.asyncio
    async def test_empty_locations(self, elevation_tools):
        tools, service = elevation_tools

        data = json.loads(await tools["elevation_batch"](locations=[]))

        assert data["error"] == "Locations array cannot be empty"
        service.fetch_elevations.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_locations_not_a_list(self, elevation_tools):
        tools, _ = elevation_tools
        data = json.loads(await tools["elevation_batch"](locations={"lat": 1, "lon": 2}))
        assert "error" in data

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "bad",
        [
            {"lat": 1.0},
            {"lon": 1.0},
            {"lat": "1.0", "lon": 2.0},
            {"lat": 1.0, "lon": math.nan},
            {"lat": False, "lon": 2.0},
            [1.0, 2.0],
            None,
        ],
    )
    async def test_invalid_location_reports_index(self, elevation_tools, bad):
        tools, service = elevation_tools
        locations = [{"lat": 1.0, "lon": 2.0}, bad]

        data = json.loads(await tools["elevation_batch"](locations=locations))

        assert "Invalid location format at index 1" in data["error"]
        service.fetch_elevations.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_service_exception_becomes_error(self, elevation_tools):
        tools, service = elevation_tools
        service.fetch_elevations = AsyncMock(side_effect=RuntimeError("boom"))

        data = json.loads(await tools["elevation_batch"](locations=[{"lat": 1, "lon": 2}]))

        assert data["error"] == "boom"


# ===========================================================================
# End to end through a real service
# ===========================================================================


class TestElevationToolsWithService:
    @pytest.mark.asyncio
    async def test_point_through_service(self, service):
        tools = _register(service)

        data = json.loads(await tools["elevation_point"](lat=42.25, lon=0.75))

        assert data["elevation_m"] == pytest.approx(13.0)
        assert data["tile"] == "N42/N42E000.hgt.gz"

    @pytest.mark.asyncio
    async def test_batch_through_service_with_missing_tile(self, service, mock_origin):
        mock_origin.missing.add("S05/S05W100.hgt.gz")
        tools = _register(service)
        locations = [
            {"lat": 42.25, "lon": 0.75},
            {"lat": -4.5, "lon": -99.5},
            {"lat": 42.125, "lon": 0.5},
        ]

        data = json.loads(await tools["elevation_batch"](locations=locations))

        assert [r["elevation_m"] for r in data["results"]] == [
            pytest.approx(13.0),
            None,
            pytest.approx(7.0),
        ]
        assert data["successful"] == 2
        assert service.cache.stats().resident == 1
