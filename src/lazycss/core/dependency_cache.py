"""
Memoized dependency lists of top-level stylesheets.
"""

import asyncio
from typing import Callable

from .imports import ImportGraphExtractor
from ..utils.lock_utils import KeyedLocks
from ..utils.log_utils import log_event

__all__ = ['DependencyCache']


class DependencyCache:
    """
    Per-source cache of transitive import lists

    An entry lives until ``invalidate`` is called for its source, which has to
    happen every time the source is recompiled. Entries are never refreshed
    when only an imported file changes.

    ``get`` and ``invalidate`` hold a lock of the key, so concurrent misses of
    the same source extract once and a reader never sees a half-invalidated
    entry. Different sources don't block each other.
    """

    def __init__(self, extract: Callable[[str], list[str]] | None = None):
        """
        :param extract: Function returning the dependency list of a source,
                        ``ImportGraphExtractor().extract`` by default
        """
        self._extract = extract or ImportGraphExtractor().extract
        self._entries: dict[str, list[str]] = {}
        self._locks = KeyedLocks()

    def __contains__(self, source_path: str) -> bool:
        return source_path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, source_path: str) -> list[str]:
        """
        Get the dependencies of a source, extracting them on a miss

        :param source_path: Normalized path of the top-level stylesheet
        :return: A copy of the cached dependency list
        :raises ReadError: If the source can't be read on a miss
        :raises ParseError: If the source is malformed on a miss
        """
        async with self._locks.hold(source_path):
            deps = self._entries.get(source_path)
            if deps is None:
                log_event("extracting dependencies", source_path)
                deps = await asyncio.to_thread(self._extract, source_path)
                self._entries[source_path] = deps
            return list(deps)

    async def invalidate(self, source_path: str) -> None:
        """Forget the dependencies of exactly this source."""
        async with self._locks.hold(source_path):
            if self._entries.pop(source_path, None) is not None:
                log_event("invalidated", source_path)

    def peek(self, source_path: str) -> list[str] | None:
        """Cached dependencies of a source, without extracting them."""
        deps = self._entries.get(source_path)
        return None if deps is None else list(deps)

    def clear(self) -> None:
        self._entries.clear()
