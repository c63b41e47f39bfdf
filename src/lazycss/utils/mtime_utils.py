"""File modification time utilities for staleness checks."""

import asyncio
import os
from typing import Iterable, Sequence

from ..stylesheet.exceptions import StatError


def stat_mtime(file_path: str) -> float:
    """Get file modification time as timestamp.

    Args:
        file_path: Path to the file

    Returns:
        Modification time as timestamp

    Raises:
        StatError: If the file can't be stat'ed (missing files included)
    """
    try:
        return os.stat(file_path).st_mtime
    except OSError as e:
        raise StatError(f"Error reading modification time of {file_path}: {e}",
                        path=file_path, cause=e)


async def get_mtime(file_path: str) -> float:
    """Get file modification time without blocking the event loop."""
    return await asyncio.to_thread(stat_mtime, file_path)


async def probe(paths: Sequence[str]) -> dict[str, float]:
    """Get modification times of several files concurrently.

    Either every path is stat'ed or the whole call fails, there is no partial
    result.

    Args:
        paths: Paths to stat

    Returns:
        Mapping of path to modification time

    Raises:
        StatError: For the first path that can't be stat'ed
    """
    if not paths:
        return {}
    mtimes = await asyncio.gather(*(get_mtime(path) for path in paths))
    return dict(zip(paths, mtimes))


def newer_than(mtimes: Iterable[float], reference: float) -> bool:
    """Check if any of the timestamps is strictly newer than the reference."""
    return any(mtime > reference for mtime in mtimes)

