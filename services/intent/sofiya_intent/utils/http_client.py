"""
Shared HTTP client with connection pooling for outbound completion calls
"""

from typing import Any, Dict, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


class HTTPClientPool:
    """Lazily created, process-wide httpx.AsyncClient"""

    _instance = None
    _client = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def initialize(self):
        """Initialize the HTTP client"""
        if self._client is None:
            # Completion traffic is a handful of concurrent calls at most
            limits = httpx.Limits(
                max_keepalive_connections=10,
                max_connections=20,
                keepalive_expiry=30.0
            )

            # Per-request timeouts come from the caller
            timeout = httpx.Timeout(10.0, connect=5.0)

            self._client = httpx.AsyncClient(
                limits=limits,
                timeout=timeout,
                follow_redirects=True
            )

            logger.info("HTTP client pool initialized",
                        max_connections=20,
                        max_keepalive=10)

    async def get_client(self) -> httpx.AsyncClient:
        """Get the shared HTTP client"""
        if self._client is None:
            await self.initialize()
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP client pool closed")


# Global instance
http_pool = HTTPClientPool()


async def get_http_client() -> httpx.AsyncClient:
    """Get the shared HTTP client instance"""
    return await http_pool.get_client()


async def post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None
) -> Dict[str, Any]:
    """POST a JSON payload and decode the JSON answer, raising on HTTP errors"""
    client = await get_http_client()

    kwargs = {"headers": headers or {}, "json": payload}
    if timeout:
        kwargs["timeout"] = timeout

    try:
        response = await client.post(url, **kwargs)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPError as e:
        logger.warning("HTTP request failed",
                       url=url,
                       error_type=type(e).__name__,
                       error=str(e))
        raise
