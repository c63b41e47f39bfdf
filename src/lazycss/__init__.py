"""Lazily compile SCSS stylesheets to CSS when they are requested."""

from .core.compiler import CompilationService, ArtifactWriter, create_compilation_service
from .core.dependency_cache import DependencyCache
from .core.imports import ImportGraphExtractor
from .core.resolver import StalenessResolver
from .middleware import StylesheetMiddleware
from .stylesheet import Decision, StylesheetConfig

__all__ = [
    "CompilationService",
    "ArtifactWriter",
    "create_compilation_service",
    "DependencyCache",
    "ImportGraphExtractor",
    "StalenessResolver",
    "StylesheetMiddleware",
    "Decision",
    "StylesheetConfig",
]
