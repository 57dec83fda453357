"""
Global test configuration.
Fixtures shared by unit and integration tests.
"""
import logging

import pytest

from configctl.local import LocalController
from configctl.remote import RemoteController
from configctl.store import Store

# Configure logging for tests
logging.basicConfig(level=logging.INFO)


@pytest.fixture
def store():
    """Empty store."""
    return Store()


@pytest.fixture
def local_controller():
    """Local controller on an ephemeral loopback port, closed after the test."""
    controller = LocalController(host="127.0.0.1", port=0, logger=logging.getLogger("test.local"))
    yield controller
    controller.close()


@pytest.fixture
def remote_controller(local_controller):
    """Remote controller pointed at local_controller."""
    controller = RemoteController(local_controller.endpoint, logger=logging.getLogger("test.remote"), timeout=5.0)
    yield controller
    controller.close()


@pytest.fixture
def restore_root_logger():
    """Undo setup_logging calls made by a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
