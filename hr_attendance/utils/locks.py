"""키 단위 비동기 잠금 레지스트리.

Keyed asyncio lock registry. Serializes coroutines that touch the same key
(e.g. one employee's attendance on one date) while unrelated keys proceed
in parallel. Locks are dropped once no coroutine holds or waits on them.
"""

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager


class KeyedLocks:
    """키별 asyncio.Lock 모음 (Per-key asyncio locks)."""

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._waiters: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """주어진 키의 잠금을 획득합니다 (Acquire the lock for ``key``)."""
        lock: asyncio.Lock = self._locks.setdefault(key, asyncio.Lock())
        self._waiters[key] = self._waiters.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[key] -= 1
            if self._waiters[key] == 0:
                del self._waiters[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)
