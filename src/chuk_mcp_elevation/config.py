"""
Service settings read from environment variables.

The server entry point loads a ``.env`` file first (python-dotenv), so values
may come from either source. The durable tier is enabled only when a bucket
is configured.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .constants import (
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_SWEEP_INTERVAL_SECONDS,
    DEFAULT_TTL_SECONDS,
    ORIGIN_BASE_URL,
    EnvVar,
)
from .core.durable import DurableStorageConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ElevationSettings:
    """Construction parameters for an ElevationService."""

    ttl_seconds: float = DEFAULT_TTL_SECONDS
    origin_base_url: str = ORIGIN_BASE_URL
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    sweep_interval_s: float = DEFAULT_SWEEP_INTERVAL_SECONDS
    durable: DurableStorageConfig | None = None


def load_settings(environ: Mapping[str, str] | None = None) -> ElevationSettings:
    """Build settings from ``environ`` (defaults to ``os.environ``)."""
    env = os.environ if environ is None else environ

    return ElevationSettings(
        ttl_seconds=_positive_number(env, EnvVar.TILE_TTL, float, DEFAULT_TTL_SECONDS),
        origin_base_url=env.get(EnvVar.ORIGIN_URL) or ORIGIN_BASE_URL,
        max_concurrency=_positive_number(
            env, EnvVar.MAX_CONCURRENCY, int, DEFAULT_MAX_CONCURRENCY
        ),
        sweep_interval_s=_positive_number(
            env, EnvVar.SWEEP_INTERVAL, float, DEFAULT_SWEEP_INTERVAL_SECONDS
        ),
        durable=_durable_config(env),
    )


def _durable_config(env: Mapping[str, str]) -> DurableStorageConfig | None:
    bucket = env.get(EnvVar.S3_BUCKET)
    if not bucket:
        return None

    access_key = env.get(EnvVar.AWS_ACCESS_KEY_ID) or None
    secret_key = env.get(EnvVar.AWS_SECRET_ACCESS_KEY) or None
    if bool(access_key) != bool(secret_key):
        logger.warning(
            f"Only one of {EnvVar.AWS_ACCESS_KEY_ID} and {EnvVar.AWS_SECRET_ACCESS_KEY} is set; "
            "falling back to the default credential chain."
        )
        access_key = secret_key = None

    config = DurableStorageConfig(
        bucket=bucket,
        endpoint=env.get(EnvVar.S3_ENDPOINT) or None,
        region=env.get(EnvVar.S3_REGION) or None,
        access_key_id=access_key,
        secret_access_key=secret_key,
        force_path_style=env.get(EnvVar.S3_FORCE_PATH_STYLE, "").strip().lower() in _TRUE_VALUES,
    )
    logger.info(f"Durable tier enabled (bucket: {bucket})")
    logger.info(f"  Endpoint: {config.endpoint or 'default'}")
    return config


def _positive_number(env: Mapping[str, str], name: str, cast: type, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using default {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}; using default {default}")
        return default
    return value
