"""
In-memory entry space shared by local and remote callers.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

from common.metrics import store_metrics
from configctl.rwlock import RWLock

logger = logging.getLogger(__name__)


@dataclass
class Scalar:
    """A single string stored under a top-level key."""
    value: str


@dataclass
class Namespace:
    """Sub-map of string values addressed by (prefix, key)."""
    values: Dict[str, str] = field(default_factory=dict)


Entry = Union[Scalar, Namespace]


def _dump(pairs: Dict[str, str], keys: Iterable[str]) -> List[str]:
    keys = list(keys)
    if not keys:
        return [f"{k}={v}" for k, v in pairs.items()]
    return [f"{k}={pairs[k]}" for k in keys if k in pairs]


class Store:
    """
    Key/value entry space with flat keys and prefixed namespaces.

    Each top-level key holds either a Scalar or a Namespace. Reads of the
    wrong shape report "not found"; writes of the other shape replace the
    entry. Keys are never removed.

    All access goes through an RWLock: reads share it, writes (including the
    read-modify-write in add/add_for) hold it exclusively.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        """
        Args:
            initial: Scalar entries to seed the store with.
        """
        self._lock = RWLock()
        self._entries: Dict[str, Entry] = {}

        for key, value in (initial or {}).items():
            self._entries[key] = Scalar(value)

    def set(self, key: str, value: str) -> None:
        store_metrics["operations"].labels(operation="set").inc()

        with self._lock.write():
            self._entries[key] = Scalar(value)

    def set_for(self, prefix: str, key: str, value: str) -> None:
        store_metrics["operations"].labels(operation="set_for").inc()

        with self._lock.write():
            self._namespace(prefix).values[key] = value

    def add(self, key: str, value: str, delim: str) -> None:
        """
        Append value to the scalar at key, separated by delim.

        A key without a scalar value is set to value as is.
        """
        store_metrics["operations"].labels(operation="add").inc()

        with self._lock.write():
            entry = self._entries.get(key)
            if isinstance(entry, Scalar):
                value = entry.value + delim + value
            self._entries[key] = Scalar(value)

    def add_for(self, prefix: str, key: str, value: str, delim: str) -> None:
        """
        Append value to key inside the namespace at prefix, separated by delim.
        """
        store_metrics["operations"].labels(operation="add_for").inc()

        with self._lock.write():
            values = self._namespace(prefix).values
            if key in values:
                value = values[key] + delim + value
            values[key] = value

    def get(self, key: str) -> Tuple[str, bool]:
        store_metrics["operations"].labels(operation="get").inc()

        with self._lock.read():
            entry = self._entries.get(key)
            if isinstance(entry, Scalar):
                return entry.value, True

        return "", False

    def get_for(self, prefix: str, key: str) -> Tuple[str, bool]:
        store_metrics["operations"].labels(operation="get_for").inc()

        with self._lock.read():
            entry = self._entries.get(prefix)
            if isinstance(entry, Namespace) and key in entry.values:
                return entry.values[key], True

        return "", False

    def dump_env(self, *keys: str) -> List[str]:
        """
        Scalars as "key=value" strings.

        Args:
            keys: Keys to include, in output order. Every scalar when empty.

        Returns:
            List[str]: Matching entries; namespaces and unknown keys are skipped
        """
        store_metrics["operations"].labels(operation="dump_env").inc()

        with self._lock.read():
            scalars = {k: e.value for k, e in self._entries.items() if isinstance(e, Scalar)}

        return _dump(scalars, keys)

    def dump_env_for(self, prefix: str, *keys: str) -> List[str]:
        """
        Namespace values as "key=value" strings.

        Returns an empty list when prefix is not a populated namespace.
        """
        store_metrics["operations"].labels(operation="dump_env_for").inc()

        with self._lock.read():
            entry = self._entries.get(prefix)
            if not isinstance(entry, Namespace) or not entry.values:
                return []
            values = dict(entry.values)

        return _dump(values, keys)

    def stats(self) -> Dict[str, int]:
        """
        Count top-level entries by shape.
        """
        with self._lock.read():
            namespaces = sum(1 for e in self._entries.values() if isinstance(e, Namespace))
            scalars = len(self._entries) - namespaces

        store_metrics["entries"].labels(shape="scalar").set(scalars)
        store_metrics["entries"].labels(shape="namespace").set(namespaces)

        return {"scalars": scalars, "namespaces": namespaces}

    def _namespace(self, prefix: str) -> Namespace:
        # Caller holds the write lock
        entry = self._entries.get(prefix)
        if not isinstance(entry, Namespace):
            if entry is not None:
                logger.debug("Replacing scalar at %r with a namespace", prefix)
            entry = Namespace()
            self._entries[prefix] = entry
        return entry
