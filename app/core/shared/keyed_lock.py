"""
Keyed asyncio locks.

Serializes coroutines that work on the same logical key (a user's cart, the
payment of one order) while letting unrelated keys run concurrently. Entries are dropped as soon as no coroutine holds or waits on
them, so the registry does not grow with the number of keys ever seen.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class KeyedLock:
    """Registry of asyncio locks indexed by key."""

    def __init__(self, name: str = "keyed-lock"):
        self.name = name
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._holders: dict[Hashable, int] = {}

    def _get_lock(self, key: Hashable) -> asyncio.Lock:
        # Registry updates never await, so they are atomic within the event loop.
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._holders[key] = self._holders.get(key, 0) + 1
        return lock

    def _release_lock(self, key: Hashable) -> None:
        remaining = self._holders.get(key, 1) - 1
        if remaining <= 0:
            self._holders.pop(key, None)
            self._locks.pop(key, None)
        else:
            self._holders[key] = remaining

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """
        Hold the lock for ``key`` for the duration of the block.

        Args:
            key: Any hashable value identifying the serialized resource
        """
        lock = self._get_lock(key)
        try:
            async with lock:
                logger.debug(f"[{self.name}] acquired {key!r}")
                yield
        finally:
            self._release_lock(key)

    def is_locked(self, key: Hashable) -> bool:
        """Check whether some coroutine currently holds ``key``."""
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
