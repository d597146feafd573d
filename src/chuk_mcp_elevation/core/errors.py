"""Exception types raised by the tile resolution pipeline."""

from ..constants import ErrorMessages


class ElevationError(Exception):
    """Base class for elevation lookup failures."""


class TileUnavailableError(ElevationError):
    """No tier could produce the requested tile."""

    def __init__(self, key: str, reason: str | None = None) -> None:
        self.key = key
        self.reason = reason
        message = ErrorMessages.TILE_UNAVAILABLE.format(key)
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class CorruptTileError(ElevationError):
    """Decompressed tile payload is malformed or has the wrong size."""


class DurableTierError(ElevationError):
    """Durable object-store operation failed. Never surfaced to callers."""
