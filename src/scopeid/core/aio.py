"""Async facade over :class:`~scopeid.core.generator.UniqueIdGenerator`.

Each call runs on a worker thread so store I/O never blocks the event loop.
"""

from __future__ import annotations

import anyio.to_thread

from scopeid.core.generator import UniqueIdGenerator


class AsyncUniqueIdGenerator:
    """Awaitable wrapper sharing the wrapped generator's state and locks."""

    def __init__(self, generator: UniqueIdGenerator) -> None:
        self._generator = generator

    @property
    def generator(self) -> UniqueIdGenerator:
        return self._generator

    async def next_id(self, scope_name: str) -> int:
        return await anyio.to_thread.run_sync(self._generator.next_id, scope_name)

    async def last_id(self, scope_name: str) -> int:
        return await anyio.to_thread.run_sync(self._generator.last_id, scope_name)

    async def set_seed(self, scope_name: str, seed: int) -> None:
        await anyio.to_thread.run_sync(self._generator.set_seed, scope_name, seed)
