"""
Origin fetcher: authoritative tile archive over HTTP.

Network errors are retried with exponential backoff; a non-2xx response is
a definitive miss and is not retried.
"""

import logging

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    ORIGIN_BASE_URL,
    ORIGIN_TIMEOUT_S,
    RETRY_ATTEMPTS,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
    ErrorMessages,
)
from .errors import TileUnavailableError

logger = logging.getLogger(__name__)

logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


class OriginFetcher:
    """Fetches compressed tiles from the public Skadi archive."""

    def __init__(
        self,
        base_url: str = ORIGIN_BASE_URL,
        client: httpx.AsyncClient | None = None,
        retry_attempts: int = RETRY_ATTEMPTS,
        retry_wait_min: float = RETRY_WAIT_MIN,
        retry_wait_max: float = RETRY_WAIT_MAX,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None
        self.retry_attempts = retry_attempts
        self.retry_wait_min = retry_wait_min
        self.retry_wait_max = retry_wait_max

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=ORIGIN_TIMEOUT_S, follow_redirects=True)
        return self._client

    async def fetch(self, key: str) -> bytes:
        """
        Download the compressed tile stored under ``key``.

        Args:
            key: Canonical tile key, e.g. ``N40/N40W074.hgt.gz``

        Returns:
            Raw gzip bytes as served by the archive

        Raises:
            TileUnavailableError: On a non-2xx status or when retries are exhausted
        """
        url = self.url_for(key)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=1, min=self.retry_wait_min, max=self.retry_wait_max),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    response = await self._get_client().get(url)
        except httpx.TransportError as e:
            logger.error(f"Error fetching tile {key} from origin: {e}")
            raise TileUnavailableError(
                key, ErrorMessages.ORIGIN_NETWORK_ERROR.format(key, self.retry_attempts, e)
            ) from e

        if not response.is_success:
            logger.warning(f"Origin returned HTTP {response.status_code} for tile {key}")
            raise TileUnavailableError(
                key, ErrorMessages.ORIGIN_HTTP_ERROR.format(response.status_code, key)
            )

        logger.info(f"Fetched tile {key} from origin ({len(response.content)} bytes)")
        return response.content

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
