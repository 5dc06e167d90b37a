"""Core data models for scopeid.

Configuration objects are Pydantic BaseModel classes. The per-scope
allocation state is a plain dataclass because it carries a lock and is
mutated in place under that lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_BATCH_SIZE = 100
DEFAULT_MAX_WRITE_ATTEMPTS = 25

# ---------------------------------------------------------------------------
# Allocation state
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class ScopeState:
    """Mutable allocation state for one scope.

    ``last_id == 0`` means nothing has been issued and the scope has not yet
    been synchronized with the store.
    """

    last_id: int = 0
    highest_id_available_in_batch: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def exhausted(self) -> bool:
        return self.last_id == self.highest_id_available_in_batch


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class StoreConfig(BaseModel):
    """Which reference store backs the generator."""

    kind: Literal["file", "memory"] = "file"
    data_dir: str = ".scopeid/data"
    initial_value: int = 1


class GeneratorConfig(BaseModel):
    """Configuration for a UniqueIdGenerator."""

    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    max_write_attempts: int = Field(default=DEFAULT_MAX_WRITE_ATTEMPTS, ge=1)
    store: StoreConfig = Field(default_factory=StoreConfig)
