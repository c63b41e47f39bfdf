"""Core compilation service for programmatic use.

The middleware and the CLI should use this service rather than implementing
compilation logic directly.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Sequence

import sass

from .dependency_cache import DependencyCache
from .imports import ImportGraphExtractor
from .resolver import StalenessResolver
from ..stylesheet.config import StylesheetConfig, ConfigManager
from ..stylesheet.exceptions import ReadError, CompileError, WriteError
from ..stylesheet.models import Decision, CompileResult
from ..utils.lock_utils import KeyedLocks
from ..utils.log_utils import log_event

__all__ = ['compile_stylesheet', 'ArtifactWriter', 'CompilationService', 'create_compilation_service']

Compiler = Callable[[str, bool, Sequence[str]], str]


def compile_stylesheet(source: str, compress: bool = False, include_paths: Sequence[str] = ()) -> str:
    """
    Compile SCSS source to CSS with libsass

    :param source: The SCSS source text
    :param compress: Minify the output
    :param include_paths: Directories imports are looked up in
    :return: The CSS text
    :raises CompileError: If libsass rejects the source
    """
    try:
        return sass.compile(
            string=source,
            include_paths=list(include_paths),
            output_style='compressed' if compress else 'nested',
        )
    except sass.CompileError as e:
        raise CompileError(f"Compilation failed: {e}", details=str(e).splitlines())


class ArtifactWriter:
    """
    Compile a source file and persist the result to the output path
    """

    def __init__(self, compress: bool = False, compiler: Optional[Compiler] = None,
                 encoding: str = 'utf-8'):
        """
        :param compress: Minify the output
        :param compiler: ``compile(source, compress, include_paths) -> css`` callable,
                         libsass by default
        :param encoding: Encoding of both the source and the output
        """
        self.compress = compress
        self.compiler = compiler or compile_stylesheet
        self.encoding = encoding

    def write_sync(self, source_path: str, output_path: str) -> str:
        """
        Blocking version of write.
        """
        try:
            with open(source_path, 'r', encoding=self.encoding) as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ReadError(f"Error reading stylesheet {source_path}: {e}", path=source_path, cause=e)

        try:
            css = self.compiler(source, self.compress, [os.path.dirname(source_path)])
        except CompileError as e:
            e.path = e.path or source_path
            raise

        # Write to a temporary file first, so a half written output is never served
        output_dir = os.path.dirname(output_path)
        tmp_path = None
        try:
            os.makedirs(output_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix='.lazycss-', suffix='.tmp', dir=output_dir)
            with os.fdopen(fd, 'w', encoding=self.encoding) as f:
                f.write(css)
            os.replace(tmp_path, output_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise WriteError(f"Error writing {output_path}: {e}", path=output_path, cause=e)

        return output_path

    async def write(self, source_path: str, output_path: str) -> str:
        """
        Compile ``source_path`` and store the result at ``output_path``

        Nothing is written if reading or compiling fails.

        :return: The output path
        :raises ReadError: If the source can't be read
        :raises CompileError: If compilation fails
        :raises WriteError: If the output can't be written
        """
        log_event("rendering", output_path)
        await asyncio.to_thread(self.write_sync, source_path, output_path)
        log_event("rendered", output_path)
        return output_path


class CompilationService:
    """
    Keep compiled outputs fresh: check staleness, recompile, invalidate

    At most one compilation runs at a time for the same source. A request
    which decided to compile while another compilation of its source was
    under way checks staleness again before compiling. Locks of a source are
    dropped when no request uses them anymore.
    """

    def __init__(self, config: Optional[StylesheetConfig] = None,
                 cache: Optional[DependencyCache] = None,
                 compiler: Optional[Compiler] = None):
        """
        Initialize the compilation service.

        :param config: Options (compress, force, extensions), defaults if not given
        :param cache: Dependency cache to share, a new one if not given
        :param compiler: Replacement for the libsass compile function
        """
        self.config = config or StylesheetConfig()
        if cache is None:
            extractor = ImportGraphExtractor(source_ext=self.config.source_ext)
            cache = DependencyCache(extractor.extract)
        self.cache = cache
        self.resolver = StalenessResolver(cache, force=self.config.force)
        self.writer = ArtifactWriter(compress=self.config.compress, compiler=compiler)
        self._compile_locks = KeyedLocks()

    async def compile_file(self, source_path: str | os.PathLike, output_path: str | os.PathLike | None = None,
                           force: bool = False) -> CompileResult:
        """
        Compile a stylesheet if its output is stale.

        :param source_path: Path to the source stylesheet
        :param output_path: Output path (defaults to the source with the output extension)
        :param force: Force recompilation even if the output is up-to-date
        :return: What was decided and whether compilation happened
        :raises ReadError: If the source can't be read
        :raises ParseError: If the source or one of its imports is malformed
        :raises StatError: If a dependency can't be stat'ed
        :raises CompileError: If compilation fails
        :raises WriteError: If the output can't be written
        """
        source_path = os.path.normpath(os.path.abspath(source_path))
        if output_path is None:
            output_path = str(Path(source_path).with_suffix(self.config.output_ext))
        output_path = os.path.normpath(os.path.abspath(output_path))

        forced = force or self.resolver.force
        async with self._compile_locks.reserve(source_path) as slot:
            seen = slot.generation
            decision = Decision.STALE if forced else await self.resolver.resolve(source_path, output_path)
            if decision is Decision.UP_TO_DATE:
                return CompileResult(source_path, output_path, decision)

            async with slot.lock:
                # Another request compiled this source after we decided
                if slot.generation != seen and not forced:
                    decision = await self.resolver.resolve(source_path, output_path)
                    if decision is Decision.UP_TO_DATE:
                        return CompileResult(source_path, output_path, decision)

                await self.writer.write(source_path, output_path)
                slot.generation += 1
                # The new source may import other files
                await self.cache.invalidate(source_path)

        return CompileResult(source_path, output_path, Decision.STALE, compiled=True)

    async def needs_compilation(self, source_path: str | os.PathLike, output_path: str | os.PathLike) -> bool:
        """
        Check if a stylesheet needs compilation using modification time comparison.

        :param source_path: Path to the source stylesheet
        :param output_path: Path to the compiled output
        :return: True if compilation is needed, False otherwise
        """
        decision = await self.resolver.resolve(os.path.normpath(os.path.abspath(source_path)),
                                               os.path.normpath(os.path.abspath(output_path)))
        return decision is Decision.STALE

    def needs_compilation_sync(self, source_path: str | os.PathLike, output_path: str | os.PathLike) -> bool:
        """Synchronous wrapper for needs_compilation."""
        return asyncio.run(self.needs_compilation(source_path, output_path))

    def compile_file_sync(self, source_path: str | os.PathLike, output_path: str | os.PathLike | None = None,
                          force: bool = False) -> CompileResult:
        """Synchronous wrapper for compile_file."""
        return asyncio.run(self.compile_file(source_path, output_path, force=force))


def create_compilation_service(
        config_path: Optional[Path] = None,
        **overrides
) -> CompilationService:
    """
    Factory function to create a CompilationService instance.

    :param config_path: Optional path to config file
    :param overrides: Options replacing the loaded configuration values
    :return: Configured CompilationService instance
    :raises ValueError: If the configuration is invalid
    """
    config = ConfigManager.load_config(config_path)
    if overrides:
        config = StylesheetConfig(**{**config.to_dict(), **overrides})
    return CompilationService(config=config)
