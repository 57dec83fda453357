"""
Local configuration controller: owns the store and serves it over HTTP.
"""
import logging
import socket
import threading
import time
from typing import List, Optional, Tuple

import uvicorn

from configctl import config
from configctl.api import create_api
from configctl.controller import Controller
from configctl.exceptions import ControllerShutdownError, ControllerStartError
from configctl.store import Store


def _bind(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(128)
    except OSError:
        sock.close()
        raise
    return sock


class LocalController(Controller):
    """
    Controller owning an in-memory store, reachable by remote controllers.

    Construction binds the listening socket, seeds CONFIG_CONTROLLER_PORT with
    the bound port and starts uvicorn on a daemon thread. Store operations run
    in-process; HTTP requests are served concurrently by FastAPI's threadpool
    against the same store.
    """

    def __init__(self, host: Optional[str] = None, port: Optional[int] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Args:
            host: Bind host (defaults to CONFCTL_HOST)
            port: Bind port, 0 for an ephemeral one (defaults to CONFCTL_PORT)
            logger: Logger for lifecycle events

        Raises:
            ControllerStartError: If the socket cannot be bound or the server does not start
        """
        self.logger = logger or logging.getLogger(__name__)
        host = config.HOST if host is None else host
        port = config.PORT if port is None else port

        try:
            self._sock = _bind(host, port)
        except OSError as e:
            raise ControllerStartError(f"listen controller API server on {host}:{port}") from e

        self.port = self._sock.getsockname()[1]
        advertised = "127.0.0.1" if host in config.WILDCARD_HOSTS else host
        if ":" in advertised:
            advertised = f"[{advertised}]"
        self._endpoint = f"http://{advertised}:{self.port}"

        self._store = Store({config.PORT_KEY: str(self.port)})

        app = create_api(self._store, endpoint=self._endpoint, port=self.port)
        self._server = uvicorn.Server(uvicorn.Config(app, log_config=None, log_level="warning"))
        self._thread = threading.Thread(target=self._serve, name=f"confctl-{self.port}", daemon=True)
        self._closed = False
        self._close_lock = threading.Lock()
        self._serve_error = None

        self._thread.start()
        self._wait_started()

        self.logger.info(f"Config controller serving at {self._endpoint}")

    def _serve(self):
        try:
            self._server.run(sockets=[self._sock])
        except Exception as e:
            self._serve_error = e
            self.logger.error(f"Controller API server stopped: {e}")

    def _wait_started(self):
        deadline = time.monotonic() + config.STARTUP_TIMEOUT
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() > deadline:
                self._server.should_exit = True
                self._thread.join(config.SHUTDOWN_TIMEOUT)
                self._sock.close()
                raise ControllerStartError(f"start controller API server at {self._endpoint}") from self._serve_error
            time.sleep(0.01)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def set(self, key: str, value: str) -> None:
        self._store.set(key, value)

    def set_for(self, prefix: str, key: str, value: str) -> None:
        self._store.set_for(prefix, key, value)

    def add(self, key: str, value: str, delim: str) -> None:
        self._store.add(key, value, delim)

    def add_for(self, prefix: str, key: str, value: str, delim: str) -> None:
        self._store.add_for(prefix, key, value, delim)

    def get(self, key: str) -> Tuple[str, bool]:
        return self._store.get(key)

    def get_for(self, prefix: str, key: str) -> Tuple[str, bool]:
        return self._store.get_for(prefix, key)

    def dump_env(self, *keys: str) -> List[str]:
        return self._store.dump_env(*keys)

    def dump_env_for(self, prefix: str, *keys: str) -> List[str]:
        return self._store.dump_env_for(prefix, *keys)

    def close(self) -> None:
        """
        Stop accepting requests, let in-flight ones finish and release the socket.

        Safe to call more than once.

        Raises:
            ControllerShutdownError: If the server thread does not stop in time
        """
        with self._close_lock:
            if self._closed:
                return

            self._server.should_exit = True
            self._thread.join(config.SHUTDOWN_TIMEOUT)

            if self._thread.is_alive():
                raise ControllerShutdownError(f"API server shutdown at {self._endpoint}") from self._serve_error

            self._sock.close()
            self._closed = True

        self.logger.info(f"Config controller at {self._endpoint} closed")
