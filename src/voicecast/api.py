"""Shared HTTP plumbing for the ElevenLabs REST endpoints.

Both the voice catalog and the synthesis client send one request per
call through ``httpx.AsyncClient``. Network-layer failures are wrapped
in TransportError; status handling is left to the callers.
"""

import logging
import time
from typing import Any

import httpx

from .credentials import Credentials
from .errors import TransportError, UnauthenticatedError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"


def response_text(response: httpx.Response) -> str | None:
    """Decode a response body as text, or None if it is not valid UTF-8."""
    try:
        return response.content.decode("utf-8")
    except UnicodeDecodeError:
        return None


class APIEndpoint:
    """Base class for clients of one ElevenLabs endpoint.

    An injected ``http_client`` is used as-is and never closed here; when
    none is given, a client is created lazily and closed by ``aclose``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize endpoint client.

        Args:
            base_url: API root, e.g. https://api.elevenlabs.io/v1
            timeout: Request timeout in seconds
            http_client: Optional shared client (tests pass a MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _send(
        self,
        method: str,
        path: str,
        credentials: Credentials,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send exactly one request with the credential headers.

        Raises:
            UnauthenticatedError: If credentials are empty
            TransportError: On DNS, timeout or connection failures
        """
        if credentials.is_empty:
            raise UnauthenticatedError()

        url = f"{self._base_url}{path}"
        start_time = time.time()
        try:
            response = await self._get_client().request(
                method,
                url,
                headers=credentials.headers(),
                json=json,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Network error: request timed out ({e})") from e
        except httpx.TransportError as e:
            raise TransportError(f"Network error: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            f"{method} {url} -> {response.status_code} "
            f"({len(response.content)} bytes, {latency_ms}ms)"
        )
        return response

    async def aclose(self) -> None:
        """Close the HTTP client if this endpoint created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["APIEndpoint", "DEFAULT_BASE_URL", "response_text"]
