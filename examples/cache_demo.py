#!/usr/bin/env python3
"""
Cache Demo -- chuk-mcp-elevation

Shows the tier chain at work: the first lookup for a tile goes to the
origin (or the durable tier when S3_BUCKET is set), repeated lookups are
served from memory, and concurrent lookups for a cold tile share a single
download. Also shows the non-blocking synchronous query path.

Usage:
    python examples/cache_demo.py

    # With a local MinIO as the durable tier
    S3_BUCKET=tiles S3_ENDPOINT=http://localhost:9000 S3_FORCE_PATH_STYLE=1 \\
        AWS_ACCESS_KEY_ID=minioadmin AWS_SECRET_ACCESS_KEY=minioadmin \\
        python examples/cache_demo.py
"""

import asyncio
import time

from tool_runner import ToolRunner

from chuk_mcp_elevation.constants import ELEVATION_UNAVAILABLE
from chuk_mcp_elevation.core.elevation_service import LocationData

GRAND_CANYON = LocationData(36.0544, -112.1401)
RIM_TRAIL = [LocationData(36.05 + i * 0.01, -112.14 + i * 0.01) for i in range(20)]


async def timed(label, coro):
    start = time.perf_counter()
    result = await coro
    print(f"  {label:28s} {time.perf_counter() - start:7.3f}s")
    return result


async def main() -> None:
    async with ToolRunner() as runner:
        service = runner.service
        print(await runner.run_text("elevation_status"))

        print("\nTier chain:")
        await timed("cold lookup", service.get_elevation(GRAND_CANYON.lat, GRAND_CANYON.lon))
        await timed("warm lookup (memory)", service.get_elevation(GRAND_CANYON.lat,
                                                                  GRAND_CANYON.lon))

        # Drop the memory tier, then hit the same cold tile from 20 points at once
        await runner.run("elevation_cache_clear")
        results = await timed("20 concurrent, one tile", service.fetch_elevations(RIM_TRAIL))
        ok = sum(1 for r in results if r != ELEVATION_UNAVAILABLE)
        print(f"  {ok}/{len(results)} points resolved")

        print("\nSynchronous path (resident tiles only):")
        named = [("Grand Canyon", GRAND_CANYON), ("Sydney", LocationData(-33.8568, 151.2153))]
        values = service.fetch_elevations_sync([point for _, point in named])
        for (label, _), value in zip(named, values):
            if value == ELEVATION_UNAVAILABLE:
                shown = "unavailable (fetch scheduled)"
            else:
                shown = f"{value:.1f} m"
            print(f"  {label:14s} {shown}")

        await asyncio.sleep(5)
        print("\n" + await runner.run_text("elevation_cache_stats"))


if __name__ == "__main__":
    asyncio.run(main())
