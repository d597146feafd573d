"""
Shared helper for running chuk-mcp-elevation MCP tools directly from Python.

Provides a ToolRunner class that registers all MCP tools against an
ElevationService built from the environment, without requiring a full MCP
transport layer. Demo scripts use this to call tools as plain async
functions.

Usage:
    from tool_runner import ToolRunner

    async def main():
        async with ToolRunner() as runner:
            result = await runner.run("elevation_point", lat=46.5, lon=7.5)
            print(result)
"""

from __future__ import annotations

import json
from typing import Any

from chuk_mcp_elevation.config import load_settings
from chuk_mcp_elevation.core.elevation_service import ElevationService
from chuk_mcp_elevation.tools.cache import register_cache_tools
from chuk_mcp_elevation.tools.elevation import register_elevation_tools


class _MiniMCP:
    """Minimal MCP server that captures tools registered via @mcp.tool."""

    def __init__(self) -> None:
        self._tools: dict[str, Any] = {}

    def tool(self) -> Any:
        """Decorator factory matching @mcp.tool() usage."""

        def decorator(fn: Any) -> Any:
            self._tools[fn.__name__] = fn
            return fn

        return decorator

    def get_tool(self, name: str) -> Any:
        return self._tools[name]


class ToolRunner:
    """
    Run chuk-mcp-elevation MCP tools directly from Python.

    All five tools are registered and callable via run(tool_name, **kwargs).
    Returns parsed JSON by default. Use run_text() for human-readable output.
    Use as an async context manager so the service's sweep task and HTTP
    client are closed on exit.
    """

    def __init__(self, service: ElevationService | None = None) -> None:
        if service is None:
            settings = load_settings()
            service = ElevationService(
                ttl_seconds=settings.ttl_seconds,
                durable_config=settings.durable,
                origin_base_url=settings.origin_base_url,
                max_concurrency=settings.max_concurrency,
                sweep_interval_s=settings.sweep_interval_s,
            )
        self.service = service
        self._mcp = _MiniMCP()
        register_elevation_tools(self._mcp, self.service)
        register_cache_tools(self._mcp, self.service)

    async def __aenter__(self) -> ToolRunner:
        await self.service.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.service.close()

    @property
    def tool_names(self) -> list[str]:
        return list(self._mcp._tools.keys())

    async def run(self, tool_name: str, **kwargs: Any) -> dict[str, Any]:
        """Call a tool by name and return parsed JSON."""
        fn = self._mcp.get_tool(tool_name)
        raw = await fn(**kwargs)
        return json.loads(raw)

    async def run_text(self, tool_name: str, **kwargs: Any) -> str:
        """Call a tool by name with output_mode='text' and return plaintext."""
        fn = self._mcp.get_tool(tool_name)
        return await fn(output_mode="text", **kwargs)
