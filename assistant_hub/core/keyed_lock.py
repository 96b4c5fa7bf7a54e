"""
Per-key asyncio locks.

Provides mutual exclusion scoped to an arbitrary key (a session id, an
assistant id). Used for one-turn-at-a-time per session and single-flight
knowledge base provisioning per assistant. Coordination is process-local.

Dependencies: asyncio (stdlib)
System role: Concurrency primitive for the conversation engine and synchronizer
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Hashable


class _LockEntry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


class KeyedLock:
    """
    Registry of asyncio.Lock objects keyed by an identifier.

    Entries are created on first use and dropped once no task holds or
    waits for them, so the registry does not grow with the number of
    sessions ever seen.

    Usage:
        turn_locks = KeyedLock("session-turn")
        async with turn_locks.hold(session_id):
            ...
    """

    def __init__(self, name: str = "keyed-lock") -> None:
        self.name = name
        self._entries: dict[Hashable, _LockEntry] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        """
        Acquire the lock for a key for the duration of the block.

        Args:
            key: Lock identifier

        Yields:
            None once the lock is held
        """
        entry = self._entries.get(key)
        if entry is None:
            entry = _LockEntry()
            self._entries[key] = entry
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]

    def is_held(self, key: Hashable) -> bool:
        """Whether some task currently holds the lock for a key."""
        entry = self._entries.get(key)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)
