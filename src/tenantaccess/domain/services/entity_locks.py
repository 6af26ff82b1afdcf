"""Per-identifier locks for read-modify-write directory operations.

Mutations on the same account or role are serialized; mutations on distinct
identifiers run in parallel. Locks are created on demand and dropped once no
task holds or waits for them, so the registry does not grow with the number
of entities ever touched.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

LockKey = tuple[str, str, str]


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class EntityLockRegistry:
    """Registry of asyncio locks keyed by (kind, company_id, entity_id)."""

    def __init__(self) -> None:
        self._entries: dict[LockKey, _LockEntry] = {}

    @staticmethod
    def key(kind: str, company_id: str, entity_id: object) -> LockKey:
        return (kind, company_id, str(entity_id))

    @asynccontextmanager
    async def hold(self, kind: str, company_id: str, entity_id: object) -> AsyncIterator[None]:
        """Hold the lock for one entity for the duration of the block.

        Example:
            async with entity_locks.hold("account", company_id, account_id):
                ...  # read, modify, commit
        """
        key = self.key(kind, company_id, entity_id)
        entry = self._entries.setdefault(key, _LockEntry())
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entries.get(key) is entry:
                del self._entries[key]

    def is_locked(self, kind: str, company_id: str, entity_id: object) -> bool:
        entry = self._entries.get(self.key(kind, company_id, entity_id))
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)


# Process-wide registry shared by every service instance
entity_locks = EntityLockRegistry()
