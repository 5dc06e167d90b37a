"""Contract between the generator and its backing store."""

from __future__ import annotations

import re
import threading
from typing import Protocol, runtime_checkable

DEFAULT_INITIAL_VALUE = 1

_SCOPE_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9._-]*$")


@runtime_checkable
class OptimisticDataStore(Protocol):
    """A store holding the next unused id of each scope as text.

    ``try_optimistic_write`` is a compare-and-swap: it replaces the stored
    value only if it has not changed since the calling thread last read it
    with ``get_data``, and never applies partially.
    """

    def get_data(self, scope_name: str) -> str: ...

    def try_optimistic_write(self, scope_name: str, data: str) -> bool: ...


class ReadTracker:
    """Remembers, per thread and scope, the last value a caller read."""

    def __init__(self) -> None:
        self._local = threading.local()

    def _reads(self) -> dict[str, str]:
        reads = getattr(self._local, "reads", None)
        if reads is None:
            reads = self._local.reads = {}
        return reads

    def remember(self, scope_name: str, data: str) -> None:
        self._reads()[scope_name] = data

    def last_read(self, scope_name: str) -> str | None:
        return self._reads().get(scope_name)


def validate_scope_name(scope_name: str) -> str:
    """Reject scope names that cannot be used as a plain filename.

    Raises ``ValueError`` for empty names, path separators or leading dots.
    """
    if not isinstance(scope_name, str) or not _SCOPE_NAME_RE.match(scope_name):
        raise ValueError(
            f"Invalid scope name {scope_name!r}: use letters, digits, '.', '_' or '-' "
            "and do not start with '.' or '-'"
        )
    return scope_name
