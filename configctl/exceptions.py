"""Errors raised by the configuration controllers."""
from common.communication import TransportError


class ControllerError(Exception):
    """Base class for controller errors."""


class ControllerStartError(ControllerError):
    """The local controller could not bind or start its HTTP server."""


class ControllerShutdownError(ControllerError):
    """The local controller's HTTP server did not stop cleanly."""


__all__ = ["ControllerError", "ControllerStartError", "ControllerShutdownError", "TransportError"]
