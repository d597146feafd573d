"""Response models for chuk-mcp-elevation."""

from .responses import (
    BatchElevationResponse,
    CacheClearResponse,
    CacheStatsResponse,
    ErrorResponse,
    PointElevationResponse,
    PointResult,
    StatusResponse,
    format_response,
)

__all__ = [
    "ErrorResponse",
    "PointElevationResponse",
    "PointResult",
    "BatchElevationResponse",
    "CacheStatsResponse",
    "CacheClearResponse",
    "StatusResponse",
    "format_response",
]
