"""
Cache tools: memory-tier statistics, clearing, and server status.

These tools require no network I/O.
"""

import logging
from datetime import datetime, timezone

from ...constants import ServerConfig, SuccessMessages
from ...models.responses import (
    CacheClearResponse,
    CacheStatsResponse,
    ErrorResponse,
    StatusResponse,
    format_response,
)

logger = logging.getLogger(__name__)


def register_cache_tools(mcp, service):
    """Register cache management and status tools with the MCP server."""

    @mcp.tool()
    async def elevation_cache_stats(output_mode: str = "json") -> str:
        """Get memory-tier statistics: resident tiles and tiles being fetched.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Resident and in-flight tile counts
        """
        try:
            stats = service.stats()
            response = CacheStatsResponse(
                resident=stats.resident,
                in_flight=stats.in_flight,
                ttl_seconds=service.ttl_seconds,
                message=SuccessMessages.CACHE_STATS.format(stats.resident, stats.in_flight),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"elevation_cache_stats failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def elevation_cache_clear(output_mode: str = "json") -> str:
        """Evict every tile from the memory tier. Tiles being fetched are unaffected.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Number of tiles evicted
        """
        try:
            evicted = service.clear()
            response = CacheClearResponse(
                evicted=evicted,
                timestamp=datetime.now(timezone.utc).isoformat(),
                message=SuccessMessages.CACHE_CLEARED.format(evicted),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"elevation_cache_clear failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)

    @mcp.tool()
    async def elevation_status(output_mode: str = "json") -> str:
        """Get server health, version, origin archive, and cache configuration.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Server status information
        """
        try:
            response = StatusResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                origin_url=service.origin.base_url,
                durable_tier_enabled=service.durable_enabled,
                ttl_seconds=service.ttl_seconds,
                resident_tiles=service.stats().resident,
                timestamp=datetime.now(timezone.utc).isoformat(),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"elevation_status failed: {e}")
            return format_response(ErrorResponse(error=str(e)), output_mode)
