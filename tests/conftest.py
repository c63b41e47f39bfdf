import os
import time
from pathlib import Path

import pytest

# Fixed timestamps, far enough apart to be safe on every filesystem
T0 = 1_700_000_000


@pytest.fixture
def write_file(tmp_path: Path):
    """
    Create a file below ``tmp_path``

    :return: A function ``(rel_path, text="", mtime=None) -> absolute path``
    """

    def _write(rel_path: str, text: str = "", mtime: float | None = None) -> str:
        path = tmp_path / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return os.path.normpath(str(path))

    return _write


@pytest.fixture
def set_mtime():
    def _set(path: str, mtime: float):
        os.utime(path, (mtime, mtime))

    return _set


class CountingExtract:
    """Wraps an extract function and counts the calls."""

    def __init__(self, extract):
        self.extract = extract
        self.calls: list[str] = []

    def __call__(self, source_path: str) -> list[str]:
        self.calls.append(source_path)
        return self.extract(source_path)


class FakeCompiler:
    """Stand-in for libsass: echoes the source, records the calls."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls: list[tuple[str, bool, list[str]]] = []

    def __call__(self, source: str, compress: bool, include_paths) -> str:
        if self.delay:
            time.sleep(self.delay)
        self.calls.append((source, compress, list(include_paths)))
        return f"/* compiled */\n{source}"


@pytest.fixture
def fake_compiler():
    return FakeCompiler()
