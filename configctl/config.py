"""
Settings for the configuration controller.
"""
from common.utils import get_env_str, get_env_int, get_env_float


# Local controller bind address (port 0 = ephemeral)
HOST = get_env_str("CONFCTL_HOST", "127.0.0.1")
PORT = get_env_int("CONFCTL_PORT", 0)

# Timeouts (seconds)
REQUEST_TIMEOUT = get_env_float("CONFCTL_REQUEST_TIMEOUT", 5.0)
STARTUP_TIMEOUT = get_env_float("CONFCTL_STARTUP_TIMEOUT", 5.0)
SHUTDOWN_TIMEOUT = get_env_float("CONFCTL_SHUTDOWN_TIMEOUT", 10.0)

# Default target for the command line client
URL = get_env_str("CONFCTL_URL", "http://127.0.0.1:8080")

# HTTP API
API_PREFIX = "/api"

# Reserved key holding the local controller's bound port
PORT_KEY = "CONFIG_CONTROLLER_PORT"

# Hosts advertised as loopback in the endpoint
WILDCARD_HOSTS = ("", "0.0.0.0", "::")
