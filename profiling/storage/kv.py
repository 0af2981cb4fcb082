"""
Key-value persistence port and debounced writer.

Scoring code never talks to a storage engine directly. It hands a
snapshot function to a DebouncedPersister, which writes the snapshot
to any KeyValueStore at most once per interval after a mutation marks
state dirty. Background failures are logged and retried on the next
tick; an explicit flush() surfaces them as PersistenceError.
"""

import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol

from ..errors import PersistenceError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(Protocol):
    """Durable key-value collaborator."""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def set(self, key: str, value: bytes) -> None:
        ...

    def flush(self) -> None:
        ...


class InMemoryKeyValueStore:
    """Dictionary-backed store, for tests and ephemeral sessions."""

    def __init__(self):
        self._data: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)

    def flush(self) -> None:
        return None

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._data)


class FileKeyValueStore:
    """
    One file per key under a directory.

    Writes go to a temporary file that is atomically renamed over the
    target, so readers never see a partial value.
    """

    def __init__(self, root_dir: str):
        self.root = Path(root_dir)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.root), prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def flush(self) -> None:
        return None

    def keys(self) -> List[str]:
        return sorted(p.stem for p in self.root.glob("*.json"))


def create_store(backend: str = "memory", path: Optional[str] = None):
    """Build a key-value store by backend name ("memory" or "file")."""
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend == "file":
        if not path:
            raise ValueError("The file backend requires a storage path")
        return FileKeyValueStore(path)
    raise ValueError(f"Unknown storage backend: {backend}")


class DebouncedPersister:
    """
    Coalesces bursts of mutations into at most one write per interval.

    Attributes:
        store: Target KeyValueStore
        interval: Minimum seconds between background writes
    """

    def __init__(
        self,
        store,
        snapshot: Callable[[], Dict[str, bytes]],
        interval: float = 1.0,
    ):
        self.store = store
        self.interval = interval
        self._snapshot = snapshot
        self._dirty = False
        self._state_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.last_error: Optional[Exception] = None

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def mark_dirty(self) -> None:
        with self._state_lock:
            self._dirty = True

    def start(self) -> None:
        """Start the background flush timer (idempotent)."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="profile-persister", daemon=True)
        self._thread.start()
        logger.debug(f"Started debounced persister (interval={self.interval}s)")

    def stop(self) -> None:
        """Stop the background timer without writing pending state."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self.interval * 2 + 1)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()

    def tick(self) -> bool:
        """
        Write pending state if dirty. Failures are logged, not raised.

        Returns:
            True if a write happened
        """
        if not self._dirty:
            return False
        try:
            self._write()
        except PersistenceError as e:
            logger.error(f"Background persistence failed, will retry: {e}")
            return False
        return True

    def flush(self) -> None:
        """
        Write pending state now.

        Raises:
            PersistenceError: If the write fails
        """
        if self._dirty:
            self._write()
        try:
            self.store.flush()
        except Exception as e:
            raise PersistenceError(f"Store flush failed: {e}") from e

    def _write(self) -> None:
        with self._write_lock:
            with self._state_lock:
                self._dirty = False
            try:
                for key, value in self._snapshot().items():
                    self.store.set(key, value)
            except Exception as e:
                with self._state_lock:
                    self._dirty = True
                self.last_error = e
                raise PersistenceError(f"Failed to persist profile state: {e}") from e
            self.last_error = None
