"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO (database), the in-memory map
      simply never suspends
    - Values are JSON-compatible (dict for tasks, list[str] for index entries):
      every write replaces the whole value for its key
"""

from typing import Any, Protocol


class KeyValueMap(Protocol):
    """Exact-match map with get/insert/remove — the Task Store and User Index."""

    async def get(self, key: str) -> Any | None:
        """Stored value, or None when the key is absent."""
        ...

    async def insert(self, key: str, value: Any) -> Any | None:
        """Store value under key. Returns the previous value, or None.

        Raises StorageError when the write is rejected.
        """
        ...

    async def remove(self, key: str) -> Any | None:
        """Delete key. Returns the removed value, or None when absent."""
        ...
