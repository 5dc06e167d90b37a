"""scopeid: batched, scope-partitioned unique id generation."""

from scopeid.core.aio import AsyncUniqueIdGenerator
from scopeid.core.errors import (
    ConfigurationError,
    ContentionExceededError,
    CorruptDataError,
    IdSpaceExhaustedError,
    InvalidSeedError,
    UniqueIdGenerationError,
)
from scopeid.core.generator import UniqueIdGenerator
from scopeid.core.models import GeneratorConfig, StoreConfig
from scopeid.stores import FileDataStore, MemoryDataStore, OptimisticDataStore

__all__ = [
    "AsyncUniqueIdGenerator",
    "ConfigurationError",
    "ContentionExceededError",
    "CorruptDataError",
    "FileDataStore",
    "GeneratorConfig",
    "IdSpaceExhaustedError",
    "InvalidSeedError",
    "MemoryDataStore",
    "OptimisticDataStore",
    "StoreConfig",
    "UniqueIdGenerationError",
    "UniqueIdGenerator",
]
