"""
Response models for chuk-mcp-elevation tools.

All tool responses are Pydantic models for type safety and consistent API.
"""

from pydantic import BaseModel, ConfigDict, Field


def format_response(model: BaseModel, output_mode: str = "json") -> str:
    """Format a response model as JSON or human-readable text.

    Args:
        model: Pydantic response model instance
        output_mode: "json" (default) or "text"

    Returns:
        Formatted string
    """
    if output_mode == "text" and hasattr(model, "to_text"):
        return str(model.to_text())
    return str(model.model_dump_json())


class ErrorResponse(BaseModel):
    """Error response model for tool failures."""

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Error message describing what went wrong")

    def to_text(self) -> str:
        return f"Error: {self.error}"


class PointElevationResponse(BaseModel):
    """Response model for a single-point elevation query."""

    model_config = ConfigDict(extra="forbid")

    lat: float = Field(..., description="Latitude of the query point")
    lon: float = Field(..., description="Longitude of the query point")
    elevation_m: float = Field(..., description="Elevation in metres")
    tile: str = Field(..., description="Tile key the point resolved to")
    timestamp: str = Field(..., description="ISO-8601 UTC time of the lookup")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return "\n".join(
            [
                f"Elevation at ({self.lat:.6f}, {self.lon:.6f}): {self.elevation_m:.1f}m",
                f"Tile: {self.tile}",
            ]
        )


class PointResult(BaseModel):
    """Elevation for one point of a batch query."""

    model_config = ConfigDict(extra="forbid")

    lat: float = Field(..., description="Latitude")
    lon: float = Field(..., description="Longitude")
    elevation_m: float | None = Field(
        None, description="Elevation in metres, or null when unavailable"
    )


class BatchElevationResponse(BaseModel):
    """Response model for a batch elevation query."""

    model_config = ConfigDict(extra="forbid")

    results: list[PointResult] = Field(..., description="Per-point results in input order")
    total: int = Field(..., description="Number of points queried", ge=1)
    successful: int = Field(..., description="Number of points with an elevation", ge=0)
    timestamp: str = Field(..., description="ISO-8601 UTC time of the lookup")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, ""]
        for r in self.results:
            value = f"{r.elevation_m:.1f}m" if r.elevation_m is not None else "unavailable"
            lines.append(f"  ({r.lat:.6f}, {r.lon:.6f}): {value}")
        return "\n".join(lines)


class CacheStatsResponse(BaseModel):
    """Response model for memory-tier statistics."""

    model_config = ConfigDict(extra="forbid")

    resident: int = Field(..., description="Tiles resident in the memory tier", ge=0)
    in_flight: int = Field(..., description="Tiles currently being fetched", ge=0)
    ttl_seconds: float = Field(..., description="Sliding TTL applied to each tile")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return f"{self.message} (ttl {self.ttl_seconds:.0f}s)"


class CacheClearResponse(BaseModel):
    """Response model for clearing the memory tier."""

    model_config = ConfigDict(extra="forbid")

    evicted: int = Field(..., description="Number of tiles evicted", ge=0)
    timestamp: str = Field(..., description="ISO-8601 UTC time of the clear")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        return self.message


class StatusResponse(BaseModel):
    """Response model for server status queries."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(default="chuk-mcp-elevation", description="Server name")
    version: str = Field(default="0.1.0", description="Server version")
    status: str = Field(default="OK", description="Health status")
    origin_url: str = Field(..., description="Base URL of the origin tile archive")
    durable_tier_enabled: bool = Field(
        default=False, description="Whether the durable object-store tier is configured"
    )
    ttl_seconds: float = Field(..., description="Sliding TTL applied to each tile")
    resident_tiles: int = Field(default=0, description="Tiles resident in the memory tier")
    timestamp: str = Field(..., description="ISO-8601 UTC time of the check")

    def to_text(self) -> str:
        durable = "enabled" if self.durable_tier_enabled else "disabled"
        lines = [
            f"{self.server} v{self.version}: {self.status}",
            f"Origin: {self.origin_url}",
            f"Durable tier: {durable}",
            f"TTL: {self.ttl_seconds:.0f}s",
            f"Resident tiles: {self.resident_tiles}",
        ]
        return "\n".join(lines)
