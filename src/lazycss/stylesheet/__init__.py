"""Stylesheet parsing, models, errors and configuration."""

from .exceptions import (
    StylesheetError,
    ReadError,
    ParseError,
    StatError,
    CompileError,
    WriteError
)
from .models import Decision, RuleNode, ImportNode, Stylesheet, CompileResult
from .config import StylesheetConfig, ConfigManager
from .parser import StylesheetParser

__all__ = [
    "StylesheetError",
    "ReadError",
    "ParseError",
    "StatError",
    "CompileError",
    "WriteError",
    "Decision",
    "RuleNode",
    "ImportNode",
    "Stylesheet",
    "CompileResult",
    "StylesheetConfig",
    "ConfigManager",
    "StylesheetParser"
]
