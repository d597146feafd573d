#!/usr/bin/env python3
"""
Async Elevation MCP Server using chuk-mcp-server

Ground elevation lookups for latitude/longitude points. Tiles come from the
public Skadi SRTM archive, are cached in memory with a sliding TTL, and are
optionally mirrored to an S3-compatible bucket.
"""

import logging

from chuk_mcp_server import ChukMCPServer

from .config import load_settings
from .constants import ServerConfig
from .core.elevation_service import ElevationService
from .tools.cache import register_cache_tools
from .tools.elevation import register_elevation_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer(ServerConfig.NAME)

# Create elevation service instance
settings = load_settings()
service = ElevationService(
    ttl_seconds=settings.ttl_seconds,
    durable_config=settings.durable,
    origin_base_url=settings.origin_base_url,
    max_concurrency=settings.max_concurrency,
    sweep_interval_s=settings.sweep_interval_s,
)

# Register all tool modules
register_elevation_tools(mcp, service)
register_cache_tools(mcp, service)

# Run the server
if __name__ == "__main__":
    logger.info("Starting Elevation MCP Server...")
    mcp.run(stdio=True)
