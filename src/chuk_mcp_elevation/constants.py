"""
Constants for chuk-mcp-elevation server.

All magic strings, tile format values, and configuration defaults live here.
"""


class ServerConfig:
    NAME = "chuk-mcp-elevation"
    VERSION = "0.1.0"
    DESCRIPTION = "Ground Elevation Lookup MCP Server (Skadi SRTM tiles, tiered cache)"


class EnvVar:
    TILE_TTL = "ELEVATION_TILE_TTL"
    ORIGIN_URL = "ELEVATION_ORIGIN_URL"
    MAX_CONCURRENCY = "ELEVATION_MAX_CONCURRENCY"
    SWEEP_INTERVAL = "ELEVATION_SWEEP_INTERVAL"
    S3_ENDPOINT = "S3_ENDPOINT"
    S3_REGION = "S3_REGION"
    S3_BUCKET = "S3_BUCKET"
    S3_FORCE_PATH_STYLE = "S3_FORCE_PATH_STYLE"
    AWS_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
    AWS_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
    MCP_STDIO = "MCP_STDIO"


# Tile format (1 arc-second SRTM, Skadi layout)
TILE_SIZE = 3601
TILE_SAMPLE_BYTES = 2
TILE_BYTES = TILE_SIZE * TILE_SIZE * TILE_SAMPLE_BYTES
TILE_DTYPE = ">i2"  # big-endian signed 16-bit
TILE_EXTENSION = ".hgt.gz"
TILE_CONTENT_TYPE = "application/gzip"

# Origin archive
ORIGIN_BASE_URL = "https://elevation-tiles-prod.s3.amazonaws.com/skadi"
ORIGIN_TIMEOUT_S = 30.0

# Memory tier
DEFAULT_TTL_SECONDS = 3600
DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0

# Batch resolution
DEFAULT_MAX_CONCURRENCY = 8

# Reserved result value for "elevation unavailable for this point"
ELEVATION_UNAVAILABLE = float("-inf")

# Retry policy for origin fetches
RETRY_ATTEMPTS = 3
RETRY_WAIT_MIN = 1
RETRY_WAIT_MAX = 10


class ErrorMessages:
    TILE_UNAVAILABLE = "Tile {} could not be fetched from any tier"
    ORIGIN_HTTP_ERROR = "Origin returned HTTP {} for tile {}"
    ORIGIN_NETWORK_ERROR = "Failed to fetch tile {} after {} attempts: {}"
    CORRUPT_TILE_SIZE = "Tile payload has {} bytes, expected {}"
    CORRUPT_TILE_GZIP = "Tile payload could not be decompressed: {}"
    DURABLE_EXISTS = "Durable tier existence check failed for {}: {}"
    DURABLE_GET = "Durable tier get failed for {}: {}"
    DURABLE_PUT = "Durable tier put failed for {}: {}"
    POINT_UNAVAILABLE = "Failed to fetch elevation data for the specified location"
    EMPTY_LOCATIONS = "Locations array cannot be empty"
    INVALID_LOCATION = (
        "Invalid location format at index {}: each location must have lat and lon as numbers"
    )
    INVALID_COORDINATES = "Invalid coordinates provided: lat={}, lon={}"


class SuccessMessages:
    POINT_ELEVATION = "Elevation at point: {:.1f}m"
    BATCH_ELEVATION = "Retrieved elevation for {} of {} points"
    CACHE_STATS = "{} tile(s) resident, {} in flight"
    CACHE_CLEARED = "Cache cleared successfully ({} tile(s) evicted)"
