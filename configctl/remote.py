"""
Remote configuration controller: the controller contract over HTTP.
"""
import logging
from typing import Any, Callable, List, Optional, Tuple
from urllib.parse import quote

import httpx

from common.communication import HttpClient, TransportError, response_or_error
from common.metrics import remote_metrics
from configctl import config
from configctl.controller import Controller

# Segments the URL layer would drop or normalize away
DOT_SEGMENTS = ("", ".", "..")
DUMP_SEGMENT = "dump"


def _decode_dump(response: httpx.Response) -> List[str]:
    dump = response.json()
    if dump is None:
        return []
    if not isinstance(dump, list) or not all(isinstance(item, str) for item in dump):
        raise ValueError(f"expected a list of strings, got {type(dump).__name__}")
    return dump


class RemoteController(Controller):
    """
    Controller that proxies every operation to a local controller's HTTP API.

    Failures are never raised: mutations log them and return, reads log them
    and return ("", False) or []. A missing key and an unreachable endpoint
    look the same to the caller.
    """

    def __init__(self, host: str, logger: Optional[logging.Logger] = None,
                 timeout: Optional[float] = None, transport: Optional[httpx.BaseTransport] = None):
        """
        Args:
            host: Base URL of the local controller, e.g. http://127.0.0.1:40123
            logger: Logger receiving transport failures
            timeout: Request timeout in seconds (defaults to CONFCTL_REQUEST_TIMEOUT)
            transport: httpx transport override
        """
        self.logger = logger or logging.getLogger(__name__)
        self._endpoint = host.rstrip("/") + config.API_PREFIX
        self.http = HttpClient(
            self._endpoint,
            timeout=config.REQUEST_TIMEOUT if timeout is None else timeout,
            transport=transport
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def set(self, key: str, value: str) -> None:
        self._call("set", "PUT", key, value)

    def set_for(self, prefix: str, key: str, value: str) -> None:
        self._call("set_for", "PUT", prefix, key, value)

    def add(self, key: str, value: str, delim: str) -> None:
        self._call("add", "POST", key, value, params={"delim": delim})

    def add_for(self, prefix: str, key: str, value: str, delim: str) -> None:
        self._call("add_for", "POST", prefix, key, value, params={"delim": delim})

    def get(self, key: str) -> Tuple[str, bool]:
        return self._read_value("get", key)

    def get_for(self, prefix: str, key: str) -> Tuple[str, bool]:
        return self._read_value("get_for", prefix, key)

    def dump_env(self, *keys: str) -> List[str]:
        dump = self._call("dump_env", "GET", DUMP_SEGMENT, json=list(keys), decode=_decode_dump)
        return dump if dump is not None else []

    def dump_env_for(self, prefix: str, *keys: str) -> List[str]:
        dump = self._call("dump_env_for", "GET", prefix, DUMP_SEGMENT, json=list(keys), decode=_decode_dump)
        return dump if dump is not None else []

    def close(self) -> None:
        """Release pooled connections; the controller stays usable."""
        self.http.close()

    def _read_value(self, operation: str, *segments: str) -> Tuple[str, bool]:
        # GET .../dump is routed to the dump endpoints, never to a value
        if segments[-1] == DUMP_SEGMENT:
            self.logger.error(f"{operation}: key {DUMP_SEGMENT!r} cannot be read remotely")
            remote_metrics["requests"].labels(operation=operation, result="rejected").inc()
            return "", False

        value = self._call(operation, "GET", *segments, decode=lambda r: r.text)
        if value is None:
            return "", False
        return value, True

    def _call(self, operation: str, method: str, *segments: str, params: Optional[dict] = None,
              json: Any = None, decode: Optional[Callable[[httpx.Response], Any]] = None) -> Any:
        """
        Send one request and check for a 200 response.

        Returns:
            The decoded body, or None on any failure (already logged)
        """
        for segment in segments:
            if segment in DOT_SEGMENTS or "/" in segment:
                self.logger.error(f"{operation}: cannot send {segment!r} as a path segment")
                remote_metrics["requests"].labels(operation=operation, result="rejected").inc()
                return None

        path = "/" + "/".join(quote(segment, safe="") for segment in segments)

        try:
            response = self.http.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            self.logger.error(f"{operation}: send request to {self._endpoint}{path}: {e}")
            remote_metrics["requests"].labels(operation=operation, result="transport_error").inc()
            return None

        try:
            result = response_or_error(response, 200, decode)
        except TransportError as e:
            self.logger.error(f"{operation}: check response: {e}")
            remote_metrics["requests"].labels(operation=operation, result="bad_response").inc()
            return None

        remote_metrics["requests"].labels(operation=operation, result="ok").inc()
        return result
