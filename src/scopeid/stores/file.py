"""Directory-backed store safe across processes on one host.

Each scope is a text file ``<scope>.txt`` holding the next unused id.
Compare-and-swap writes hold an exclusive ``flock`` on ``<scope>.lock``,
re-read the current value, and replace the file atomically via a temporary
file, fsync and ``os.replace``.
"""

from __future__ import annotations

import contextlib
import fcntl
import logging
import os
from collections.abc import Iterator
from pathlib import Path

from scopeid.stores.base import DEFAULT_INITIAL_VALUE, ReadTracker, validate_scope_name

logger = logging.getLogger(__name__)


class FileDataStore:
    """File-per-scope implementation of the store contract."""

    def __init__(self, directory: Path, initial_value: int = DEFAULT_INITIAL_VALUE) -> None:
        self._directory = Path(directory)
        self._initial_value = str(initial_value)
        self._reads = ReadTracker()

    @property
    def directory(self) -> Path:
        return self._directory

    # -- Public API ----------------------------------------------------------

    def get_data(self, scope_name: str) -> str:
        path = self._data_path(scope_name)
        with self._locked(scope_name):
            if not path.exists():
                logger.info("Initializing scope %s at %s in %s", scope_name, self._initial_value, path)
                self._write_atomic(path, self._initial_value)
            data = path.read_text(encoding="utf-8")
        self._reads.remember(scope_name, data)
        return data

    def try_optimistic_write(self, scope_name: str, data: str) -> bool:
        path = self._data_path(scope_name)
        expected = self._reads.last_read(scope_name)
        if expected is None:
            return False

        with self._locked(scope_name):
            try:
                current = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return False
            if current != expected:
                logger.debug("Optimistic write to %s rejected: value changed", path)
                return False
            self._write_atomic(path, data)

        self._reads.remember(scope_name, data)
        return True

    # -- Internals -----------------------------------------------------------

    def _data_path(self, scope_name: str) -> Path:
        return self._directory / f"{validate_scope_name(scope_name)}.txt"

    @contextlib.contextmanager
    def _locked(self, scope_name: str) -> Iterator[None]:
        self._directory.mkdir(parents=True, exist_ok=True)
        lock_path = self._directory / f"{scope_name}.lock"
        fd = os.open(str(lock_path), os.O_RDWR | os.O_CREAT, 0o644)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)

    @staticmethod
    def _write_atomic(path: Path, data: str) -> None:
        tmp_path = path.parent / f"{path.name}.tmp"
        fd = os.open(str(tmp_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        try:
            os.write(fd, data.encode("utf-8"))
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmp_path, path)
