"""
Staleness resolution: is the compiled output still valid for its source?
"""

import asyncio

from .dependency_cache import DependencyCache
from ..stylesheet.exceptions import StatError
from ..stylesheet.models import Decision
from ..utils.log_utils import log_event
from ..utils.mtime_utils import get_mtime, probe, newer_than

__all__ = ['StalenessResolver']


class StalenessResolver:
    """
    Decide whether an output file has to be regenerated

    The output is stale when it is missing, or when the source or any file the
    source imports (transitively) has a strictly newer modification time.
    Equal timestamps count as up to date.

    Dependencies come from the cache. After acting on a ``STALE`` decision the
    caller must invalidate the cache entry of the source, since the recompiled
    source may import different files.
    """

    def __init__(self, cache: DependencyCache | None = None, force: bool = False):
        """
        :param cache: The dependency cache to use, a private one by default
        :param force: Always report ``STALE`` without looking at the filesystem
        """
        self.cache = cache if cache is not None else DependencyCache()
        self.force = force

    async def resolve(self, source_path: str, output_path: str) -> Decision:
        """
        Check one source/output pair

        :param source_path: Normalized path of the source stylesheet
        :param output_path: Normalized path of the compiled output
        :return: The decision
        :raises StatError: If a file other than the output can't be stat'ed,
                           or the output stat fails for another reason than
                           it being missing
        :raises ReadError: If the source can't be read for dependency extraction
        :raises ParseError: If the source or one of its imports is malformed
        """
        if self.force:
            return Decision.STALE

        try:
            output_mtime = await get_mtime(output_path)
        except StatError as e:
            if e.is_not_found:
                log_event("missing", output_path)
                return Decision.STALE
            raise

        deps = await self.cache.get(source_path)
        files = deps + [source_path]
        log_event("checking files", " ".join(files))
        mtimes = await probe(files)

        if newer_than(mtimes.values(), output_mtime):
            log_event("modified", source_path)
            return Decision.STALE
        return Decision.UP_TO_DATE

    def resolve_sync(self, source_path: str, output_path: str) -> Decision:
        """
        Synchronous wrapper for resolve.
        """
        return asyncio.run(self.resolve(source_path, output_path))
