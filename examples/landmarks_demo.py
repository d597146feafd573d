#!/usr/bin/env python3
"""
Landmarks Demo -- chuk-mcp-elevation

Looks up ground elevation for a handful of well-known places, first one at
a time and then as a single batch. Points that share a tile (the two
Alpine summits below) download it once. Requires network access to the
public Skadi tile archive.

Usage:
    python examples/landmarks_demo.py
"""

import asyncio

from tool_runner import ToolRunner

LANDMARKS = [
    ("Mount Everest", 27.9881, 86.9250),
    ("Jungfrau", 46.5370, 7.9626),
    ("Eiger", 46.5776, 7.9975),
    ("Dead Sea shore", 31.5590, 35.4732),
    ("Stonehenge", 51.1789, -1.8262),
    ("Denver", 39.7392, -104.9903),
]


async def main() -> None:
    async with ToolRunner() as runner:
        print("=" * 60)
        print("chuk-mcp-elevation -- Landmark Elevations")
        print("=" * 60)

        # Single point, text mode
        name, lat, lon = LANDMARKS[0]
        print(f"\n{name}:")
        print(await runner.run_text("elevation_point", lat=lat, lon=lon))

        # Batch, JSON mode
        locations = [{"lat": lat, "lon": lon} for _, lat, lon in LANDMARKS]
        batch = await runner.run("elevation_batch", locations=locations)
        if "error" in batch:
            print(f"\nBatch failed: {batch['error']}")
            return

        print(f"\n{batch['message']}")
        for (name, _, _), result in zip(LANDMARKS, batch["results"]):
            value = result["elevation_m"]
            shown = f"{value:8.1f} m" if value is not None else "unavailable"
            print(f"  {name:16s} {shown}")

        # Cache occupancy after the batch
        print("\n" + await runner.run_text("elevation_cache_stats"))


if __name__ == "__main__":
    asyncio.run(main())
