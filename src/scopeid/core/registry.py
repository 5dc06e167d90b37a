"""Registry mapping scope names to their allocation state."""

from __future__ import annotations

import threading

from scopeid.core.models import ScopeState


class ScopeStateRegistry:
    """Get-or-create mapping of scope name to :class:`ScopeState`.

    Lookups of existing scopes take no lock. Only the insertion of a new
    scope goes through a short critical section, so allocation on unrelated
    scopes never serializes on the registry.
    """

    def __init__(self) -> None:
        self._states: dict[str, ScopeState] = {}
        self._insert_lock = threading.Lock()

    def get_or_create(self, scope_name: str) -> ScopeState:
        """Return the state for *scope_name*, creating it on first access.

        The same object is returned for every call with the same name.
        """
        state = self._states.get(scope_name)
        if state is not None:
            return state

        with self._insert_lock:
            return self._states.setdefault(scope_name, ScopeState())

    def scope_names(self) -> list[str]:
        """Return the names of every scope seen so far, sorted."""
        return sorted(self._states)

    def __contains__(self, scope_name: object) -> bool:
        return scope_name in self._states

    def __len__(self) -> int:
        return len(self._states)
