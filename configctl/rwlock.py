"""Reader-writer lock: shared reads, exclusive writes."""
import threading


class RWLock:
    """
    Reader-writer lock.

    Allows:
    - Multiple readers to hold the lock simultaneously
    - Only one writer at a time, with no readers
    - Waiting writers block new readers, so writers do not starve
    """

    def __init__(self):
        self._readers = 0  # Active readers
        self._writer = False  # Whether a writer is active
        self._writers_waiting = 0
        self._lock = threading.Lock()
        self._readers_ok = threading.Condition(self._lock)
        self._writers_ok = threading.Condition(self._lock)

    def acquire_read(self):
        with self._lock:
            while self._writer or self._writers_waiting:
                self._readers_ok.wait()
            self._readers += 1

    def release_read(self):
        with self._lock:
            self._readers -= 1
            if self._readers == 0:
                self._writers_ok.notify()

    def acquire_write(self):
        with self._lock:
            self._writers_waiting += 1
            try:
                while self._readers > 0 or self._writer:
                    self._writers_ok.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self):
        with self._lock:
            self._writer = False
            # Next writer first, then every reader (they recheck the waiting count)
            self._writers_ok.notify()
            self._readers_ok.notify_all()

    def read(self) -> "ReadLock":
        return ReadLock(self)

    def write(self) -> "WriteLock":
        return WriteLock(self)


class ReadLock:
    """Context manager for read locks."""

    def __init__(self, rwlock: RWLock):
        self.rwlock = rwlock

    def __enter__(self):
        self.rwlock.acquire_read()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.rwlock.release_read()
        return False


class WriteLock:
    """Context manager for write locks."""

    def __init__(self, rwlock: RWLock):
        self.rwlock = rwlock

    def __enter__(self):
        self.rwlock.acquire_write()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.rwlock.release_write()
        return False
