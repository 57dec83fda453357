"""
Controller contract shared by the local, remote and disabled variants.
"""
from abc import ABC, abstractmethod
from typing import List, Tuple


class Controller(ABC):
    """
    Configuration controller for a test environment.

    Every variant exposes the same operations; none of them raises for a
    missing key. Absence is reported as ("", False) or an empty dump.
    """

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Address the controller is reachable at."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Set a config variable."""

    @abstractmethod
    def set_for(self, prefix: str, key: str, value: str) -> None:
        """Set a config option for a prefix."""

    @abstractmethod
    def add(self, key: str, value: str, delim: str) -> None:
        """Set a config variable, or append to it using delim."""

    @abstractmethod
    def add_for(self, prefix: str, key: str, value: str, delim: str) -> None:
        """Set a config option for a prefix, or append to it using delim."""

    @abstractmethod
    def get(self, key: str) -> Tuple[str, bool]:
        """Value of a config variable and whether it was found."""

    @abstractmethod
    def get_for(self, prefix: str, key: str) -> Tuple[str, bool]:
        """Value of a prefixed config option and whether it was found."""

    @abstractmethod
    def dump_env(self, *keys: str) -> List[str]:
        """Config variables as "key=value" strings."""

    @abstractmethod
    def dump_env_for(self, prefix: str, *keys: str) -> List[str]:
        """Prefixed config options as "key=value" strings."""

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the controller."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class DisabledController(Controller):
    """
    Controller used when none is configured: writes are dropped, reads find nothing.
    """

    @property
    def endpoint(self) -> str:
        return ""

    def set(self, key: str, value: str) -> None:
        pass

    def set_for(self, prefix: str, key: str, value: str) -> None:
        pass

    def add(self, key: str, value: str, delim: str) -> None:
        pass

    def add_for(self, prefix: str, key: str, value: str, delim: str) -> None:
        pass

    def get(self, key: str) -> Tuple[str, bool]:
        return "", False

    def get_for(self, prefix: str, key: str) -> Tuple[str, bool]:
        return "", False

    def dump_env(self, *keys: str) -> List[str]:
        return []

    def dump_env_for(self, prefix: str, *keys: str) -> List[str]:
        return []

    def close(self) -> None:
        pass
