"""
Per-key asyncio locks which only live while somebody uses them.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator

__all__ = ['KeyedLocks', 'LockSlot']


@dataclass
class LockSlot:
    """
    The lock of one key

    ``users`` counts the tasks which reserved the slot. ``generation`` is free
    for the owner to bump whenever the guarded work completed.
    """
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0
    generation: int = 0


class KeyedLocks:
    """
    Locks keyed by string, dropped when the last user releases its slot
    """

    def __init__(self):
        self._slots: dict[str, LockSlot] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    @asynccontextmanager
    async def reserve(self, key: str) -> AsyncIterator[LockSlot]:
        """
        Keep the slot of a key alive without taking its lock

        :param key: The key
        :return: The slot, shared with every other task using the same key
        """
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = LockSlot()
        slot.users += 1
        try:
            yield slot
        finally:
            slot.users -= 1
            if not slot.users:
                del self._slots[key]

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[LockSlot]:
        """Reserve the slot of a key and hold its lock."""
        async with self.reserve(key) as slot:
            async with slot.lock:
                yield slot
