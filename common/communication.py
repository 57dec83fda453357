"""
HTTP communication shared by the controller components.
Provides a pooled synchronous client and response checking.
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional

import httpx

logger = logging.getLogger("communication")


class TransportError(Exception):
    """
    Unexpected response from a remote endpoint: wrong status code or an undecodable body.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HttpClient:
    """
    HTTP client for talking to a controller endpoint.

    Features:
    1. Configurable timeouts
    2. Keep-alive connection pooling, created lazily
    3. Optional custom transport (used by tests)

    Safe to share between threads.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, max_connections: int = 100,
                 transport: Optional[httpx.BaseTransport] = None):
        """
        Args:
            base_url: Prefix for every request path
            timeout: Default request timeout in seconds
            max_connections: Maximum concurrent connections
            transport: Transport override, e.g. httpx.MockTransport
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.limits = httpx.Limits(max_connections=max_connections)
        self.transport = transport
        self._client = None
        self._lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """
        The underlying httpx client, created on first use.
        """
        with self._lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=self.timeout,
                    limits=self.limits,
                    transport=self.transport
                )
            return self._client

    def close(self):
        """Close pooled connections."""
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()

    def request(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                json: Any = None) -> httpx.Response:
        """
        Send a request to base_url + path.

        Raises:
            httpx.HTTPError: On connection or protocol failures
        """
        url = self.base_url + path
        logger.debug(f"{method} {url} params={params}")
        return self.client.request(method, url, params=params, json=json)


def response_or_error(response: httpx.Response, expected_status: int = 200,
                      decode: Optional[Callable[[httpx.Response], Any]] = None) -> Any:
    """
    Check a response status and optionally decode its body.

    Args:
        response: Response to check
        expected_status: Status code considered a success
        decode: Callable turning the response into a value

    Returns:
        The decoded value, or None when no decoder is given

    Raises:
        TransportError: On an unexpected status or a decoding failure
    """
    if response.status_code != expected_status:
        raise TransportError(
            f"unexpected status {response.status_code} from {response.request.method} {response.request.url}",
            status_code=response.status_code
        )

    if decode is None:
        return None

    try:
        return decode(response)
    except (ValueError, TypeError) as e:
        raise TransportError(f"decode response: {e}", status_code=response.status_code) from e
