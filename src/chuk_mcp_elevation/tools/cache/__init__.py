"""Cache management and status tools."""

from .api import register_cache_tools

__all__ = ["register_cache_tools"]
