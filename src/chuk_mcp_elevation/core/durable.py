"""
Durable tier: optional S3-compatible object store for compressed tiles.

Objects are stored exactly as fetched from the origin (gzip bytes) under the
canonical tile key, so ``get`` returns what ``put`` received. boto3 is
synchronous; every call is wrapped in ``asyncio.to_thread()``.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..constants import TILE_CONTENT_TYPE, ErrorMessages
from .errors import DurableTierError

logger = logging.getLogger(__name__)

for _noisy in ("boto3", "botocore", "s3transfer", "urllib3"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

_MISSING_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass(frozen=True)
class DurableStorageConfig:
    """Connection settings for the durable tier. Only ``bucket`` is required."""

    bucket: str
    endpoint: str | None = None
    region: str | None = None
    access_key_id: str | None = None
    secret_access_key: str | None = None
    force_path_style: bool = False

    def __repr__(self) -> str:
        # Keep credentials out of logs
        return (
            f"DurableStorageConfig(bucket={self.bucket!r}, endpoint={self.endpoint!r}, "
            f"region={self.region!r}, force_path_style={self.force_path_style})"
        )


def make_s3_client(config: DurableStorageConfig) -> Any:
    """Build a boto3 S3 client from a :class:`DurableStorageConfig`."""
    addressing = "path" if config.force_path_style else "auto"
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint,
        region_name=config.region,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        config=Config(s3={"addressing_style": addressing}),
    )


class DurableTierClient:
    """Existence check, get, and put of compressed tiles in an object store."""

    def __init__(self, config: DurableStorageConfig, client: Any | None = None) -> None:
        self.config = config
        self.bucket = config.bucket
        self._client = client if client is not None else make_s3_client(config)

    async def exists(self, key: str) -> bool:
        """True if an object is stored under ``key``."""
        try:
            await asyncio.to_thread(self._client.head_object, Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return False
            raise DurableTierError(ErrorMessages.DURABLE_EXISTS.format(key, e)) from e
        except BotoCoreError as e:
            raise DurableTierError(ErrorMessages.DURABLE_EXISTS.format(key, e)) from e

    async def get(self, key: str) -> bytes | None:
        """Compressed tile bytes for ``key``, or None if absent."""
        try:
            return await asyncio.to_thread(self._read_object, key)
        except ClientError as e:
            if _error_code(e) in _MISSING_CODES:
                return None
            raise DurableTierError(ErrorMessages.DURABLE_GET.format(key, e)) from e
        except BotoCoreError as e:
            raise DurableTierError(ErrorMessages.DURABLE_GET.format(key, e)) from e

    async def put(self, key: str, blob: bytes) -> None:
        """Store compressed tile bytes under ``key``."""
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=blob,
                ContentType=TILE_CONTENT_TYPE,
            )
        except (ClientError, BotoCoreError) as e:
            raise DurableTierError(ErrorMessages.DURABLE_PUT.format(key, e)) from e
        logger.info(f"Uploaded tile {key} to durable tier")

    def _read_object(self, key: str) -> bytes:
        response = self._client.get_object(Bucket=self.bucket, Key=key)
        body = response["Body"]
        try:
            return body.read()
        finally:
            body.close()


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))
