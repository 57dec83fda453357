"""
Config controller: a shared configuration store for test environments.

A LocalController owns the store and serves it over HTTP; RemoteControllers
in other processes read and write the same store through the same contract.
"""

from configctl.controller import Controller, DisabledController
from configctl.exceptions import ControllerError, ControllerShutdownError, ControllerStartError
from configctl.local import LocalController
from configctl.remote import RemoteController
from configctl.store import Store

__all__ = [
    "Controller",
    "DisabledController",
    "LocalController",
    "RemoteController",
    "Store",
    "ControllerError",
    "ControllerStartError",
    "ControllerShutdownError",
]
