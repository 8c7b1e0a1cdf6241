"""Keyed Locks — one asyncio.Lock per map key, shared by every request in the process.

Invariants:
    - Two holders of the same key never overlap; different keys never block each other
    - A lock lives only while some coroutine holds or awaits it

Design Decisions:
    - WeakValueDictionary instead of defaultdict: idle keys are dropped, so the
      table does not grow with every identity ever seen
    - Single process only: workers in other processes do not share these locks
"""

import asyncio
import weakref
from typing import Hashable


class KeyedLocks:
    """Lazily created asyncio.Lock per key."""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[Hashable, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def __call__(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock
