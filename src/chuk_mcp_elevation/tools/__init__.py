"""MCP tool registrations for chuk-mcp-elevation."""
