"""Backing stores for the unique id generator."""

from scopeid.stores.base import OptimisticDataStore
from scopeid.stores.file import FileDataStore
from scopeid.stores.memory import MemoryDataStore

__all__ = [
    "FileDataStore",
    "MemoryDataStore",
    "OptimisticDataStore",
]
