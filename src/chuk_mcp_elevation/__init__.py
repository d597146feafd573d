"""
chuk-mcp-elevation: Ground Elevation Lookup MCP Server

Resolves latitude/longitude points to 1-degree SRTM tiles from the public
Skadi archive, caches them in memory (with an optional S3-compatible durable
tier), and returns bilinear-interpolated elevations.
"""
