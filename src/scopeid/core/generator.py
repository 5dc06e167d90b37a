"""Batched, scope-partitioned unique id generation.

Ids are reserved from an :class:`~scopeid.stores.base.OptimisticDataStore`
in batches of ``batch_size`` and then served from memory. The store holds
the first id of the *next* batch, so every process that reads it starts its
own batch strictly after the ranges already claimed. The store's
compare-and-swap is the only cross-process guard; the per-scope lock only
prevents double allocation inside one process.
"""

from __future__ import annotations

import logging
import re

from scopeid.core.errors import (
    ConfigurationError,
    ContentionExceededError,
    CorruptDataError,
    IdSpaceExhaustedError,
    InvalidSeedError,
)
from scopeid.core.models import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_WRITE_ATTEMPTS,
    GeneratorConfig,
    ScopeState,
)
from scopeid.core.registry import ScopeStateRegistry
from scopeid.metrics import (
    CONTENTION_EXCEEDED_TOTAL,
    IDS_ISSUED_TOTAL,
    REFILLS_TOTAL,
    SEEDS_TOTAL,
    WRITE_CONFLICTS_TOTAL,
)
from scopeid.stores.base import OptimisticDataStore

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INTEGER_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$")


def parse_next_id(scope_name: str, data: object) -> int:
    """Parse a raw store record as a signed 64-bit integer.

    Raises :class:`CorruptDataError` if *data* is not one.
    """
    if not isinstance(data, str) or not _INTEGER_RE.match(data):
        logger.error("Corrupt id record for scope %s: %r", scope_name, data)
        raise CorruptDataError(scope_name, data)
    value = int(data)
    if not INT64_MIN <= value <= INT64_MAX:
        logger.error("Out of range id record for scope %s: %r", scope_name, data)
        raise CorruptDataError(scope_name, data)
    return value


def _check_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
    return value


class UniqueIdGenerator:
    """Issues unique, increasing ids per scope from batches reserved in a store."""

    def __init__(
        self,
        store: OptimisticDataStore,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_write_attempts: int = DEFAULT_MAX_WRITE_ATTEMPTS,
    ) -> None:
        self._store = store
        self._states = ScopeStateRegistry()
        self._batch_size = _check_positive("batch_size", batch_size)
        self._max_write_attempts = _check_positive("max_write_attempts", max_write_attempts)

    @classmethod
    def from_config(
        cls, store: OptimisticDataStore, config: GeneratorConfig
    ) -> UniqueIdGenerator:
        return cls(
            store,
            batch_size=config.batch_size,
            max_write_attempts=config.max_write_attempts,
        )

    # -- Configuration -------------------------------------------------------

    @property
    def batch_size(self) -> int:
        """Number of ids reserved per store round trip."""
        return self._batch_size

    @batch_size.setter
    def batch_size(self, value: int) -> None:
        self._batch_size = _check_positive("batch_size", value)

    @property
    def max_write_attempts(self) -> int:
        """Upper bound on compare-and-swap attempts per reservation."""
        return self._max_write_attempts

    @max_write_attempts.setter
    def max_write_attempts(self, value: int) -> None:
        self._max_write_attempts = _check_positive("max_write_attempts", value)

    @property
    def store(self) -> OptimisticDataStore:
        return self._store

    # -- Public API ----------------------------------------------------------

    def next_id(self, scope_name: str) -> int:
        """Return the next id for *scope_name*, reserving a new batch if needed."""
        state = self._state(scope_name)

        with state.lock:
            if state.exhausted:
                self._reserve_batch(scope_name, state)
            state.last_id += 1
            issued = state.last_id

        IDS_ISSUED_TOTAL.labels(scope=scope_name).inc()
        return issued

    def last_id(self, scope_name: str) -> int:
        """Return the last id issued for *scope_name* by this generator.

        Before anything has been issued this returns the store's raw next
        id unchanged, which is one more than the ``last_id`` the scope will
        hold once its first batch is reserved. No state is modified.
        """
        state = self._state(scope_name)
        if state.last_id != 0:
            return state.last_id

        return parse_next_id(scope_name, self._store.get_data(scope_name))

    def set_seed(self, scope_name: str, seed: int) -> None:
        """Rebase *scope_name* so the next id issued is *seed*.

        Raises :class:`InvalidSeedError` if *seed* is below the store's next
        id; neither the store nor the in-memory state is changed then.
        A seed whose batch would run past the 64-bit range raises
        :class:`IdSpaceExhaustedError`.
        """
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise TypeError(f"Seed must be an integer, got {seed!r}")
        if not INT64_MIN <= seed <= INT64_MAX:
            raise ValueError(f"Seed {seed} is outside the 64-bit id range")

        state = self._state(scope_name)

        with state.lock:
            self._reserve_batch(scope_name, state, seed=seed)

        SEEDS_TOTAL.labels(scope=scope_name).inc()
        logger.info("Seeded scope %s at %d", scope_name, seed)

    def scope_names(self) -> list[str]:
        """Names of the scopes this generator has touched."""
        return self._states.scope_names()

    # -- Internals -----------------------------------------------------------

    def _state(self, scope_name: str) -> ScopeState:
        if not isinstance(scope_name, str) or not scope_name:
            raise ValueError(f"Scope name must be a non-empty string, got {scope_name!r}")
        return self._states.get_or_create(scope_name)

    def _reserve_batch(
        self, scope_name: str, state: ScopeState, seed: int | None = None
    ) -> None:
        """Claim a batch in the store and point *state* at it.

        With *seed* the batch starts at the seed, otherwise at the store's
        next id. The caller must hold ``state.lock``. *state* is only
        updated once the store accepted the write.
        """
        attempts = 0
        while attempts < self._max_write_attempts:
            next_id = parse_next_id(scope_name, self._store.get_data(scope_name))

            if seed is not None and seed < next_id:
                logger.warning(
                    "Rejected seed %d for scope %s: next available id is %d",
                    seed,
                    scope_name,
                    next_id,
                )
                raise InvalidSeedError(scope_name, seed, next_id)

            first_id = next_id if seed is None else seed
            last_id = first_id - 1
            highest_id = last_id + self._batch_size
            first_id_of_next_batch = highest_id + 1
            if first_id_of_next_batch > INT64_MAX:
                logger.error("Scope %s has run out of 64-bit ids", scope_name)
                raise IdSpaceExhaustedError(scope_name, first_id_of_next_batch)

            attempts += 1
            if self._store.try_optimistic_write(scope_name, str(first_id_of_next_batch)):
                state.last_id = last_id
                state.highest_id_available_in_batch = highest_id
                REFILLS_TOTAL.labels(scope=scope_name).inc()
                logger.debug(
                    "Reserved ids %d-%d for scope %s (attempt %d)",
                    first_id,
                    highest_id,
                    scope_name,
                    attempts,
                )
                return

            WRITE_CONFLICTS_TOTAL.labels(scope=scope_name).inc()
            logger.debug("Write conflict on scope %s (attempt %d)", scope_name, attempts)

        CONTENTION_EXCEEDED_TOTAL.labels(scope=scope_name).inc()
        logger.warning(
            "Gave up reserving a batch for scope %s after %d attempts", scope_name, attempts
        )
        raise ContentionExceededError(scope_name, attempts)
