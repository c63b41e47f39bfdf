"""Starlette middleware compiling stylesheets on request."""

from __future__ import annotations

import logging
import os
import posixpath
from typing import Any, NamedTuple

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .core.compiler import CompilationService
from .stylesheet.config import StylesheetConfig
from .stylesheet.exceptions import StylesheetError
from .utils.log_utils import configure_logging, log_event

__all__ = ["StylesheetMiddleware", "RequestMapper", "MappedPaths"]

_LOGGER = logging.getLogger("lazycss.middleware")

READ_ONLY_METHODS = ("GET", "HEAD")


class MappedPaths(NamedTuple):
    source_path: str
    output_path: str


class RequestMapper:
    """Map request paths of compiled outputs to source and output files."""

    def __init__(self, config: StylesheetConfig) -> None:
        self.config = config
        self.prefix = config.output_prefix

    def map(self, pathname: str) -> MappedPaths | None:
        """Return the files behind a request path, None if the path is not ours."""
        if not pathname.endswith(self.config.output_ext):
            return None

        rel = pathname
        if self.prefix and (rel == self.prefix or rel.startswith(self.prefix + "/")):
            rel = rel[len(self.prefix):]

        # Rooting the path first keeps ".." segments from escaping the directories
        rel = posixpath.normpath("/" + rel.lstrip("/")).lstrip("/")
        if not rel or rel == self.config.output_ext:
            return None

        parts = rel.split("/")
        source_name = parts[-1][: -len(self.config.output_ext)] + self.config.source_ext
        return MappedPaths(
            source_path=os.path.join(self.config.source_dir, *parts[:-1], source_name),
            output_path=os.path.join(self.config.output_dir, *parts),
        )


class StylesheetMiddleware(BaseHTTPMiddleware):
    """Compile stale stylesheets before the wrapped app serves them.

    Requests for the output extension with a read-only method are mapped to a
    source file. The output is recompiled when it is missing or older than the
    source or anything the source imports, then the request continues to the
    wrapped application. A missing source lets the request through untouched;
    every other failure propagates.
    """

    def __init__(
        self,
        app: ASGIApp,
        config: StylesheetConfig | None = None,
        service: CompilationService | None = None,
        **options: Any,
    ) -> None:
        super().__init__(app)
        if config is None:
            config = service.config if service is not None else StylesheetConfig(**options)
        elif options:
            raise TypeError("Pass either a config or keyword options, not both")
        self.config = config
        self.service = service if service is not None else CompilationService(config)
        self.mapper = RequestMapper(config)
        if config.debug:
            configure_logging(debug=True)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method not in READ_ONLY_METHODS:
            return await call_next(request)

        paths = self.mapper.map(request.url.path)
        if paths is None:
            return await call_next(request)

        forced = " (forced)" if self.service.resolver.force else ""
        log_event("request", f"{paths.output_path} -> {paths.source_path}{forced}")

        try:
            await self.service.compile_file(paths.source_path, paths.output_path)
        except StylesheetError as e:
            if not (e.is_not_found and e.path == paths.source_path):
                _LOGGER.error("stylesheet.error path=%s: %s", request.url.path, e)
                raise
            log_event("passing through", paths.source_path)

        return await call_next(request)
