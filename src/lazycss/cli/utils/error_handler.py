"""Centralized stylesheet error handling for CLI commands."""

from rich.console import Console
from typer import Exit

from lazycss.stylesheet.exceptions import (StylesheetError, ReadError, ParseError, StatError,
                                           CompileError, WriteError)


class StylesheetErrorHandler:
    """Context manager that turns stylesheet errors into messages and exit code 1."""

    def __init__(self, console: Console | None = None):
        if not console:
            console = Console()
        self.console = console

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            return False

        if issubclass(exc_type, CompileError):
            self._handle_compile_error(exc_value)
        elif issubclass(exc_type, ParseError):
            self._handle_parse_error(exc_value)
        elif issubclass(exc_type, (ReadError, StatError)):
            self._handle_file_error(exc_value)
        elif issubclass(exc_type, WriteError):
            self.console.print(f"[red]Cannot write output:[/red] {exc_value}")
        elif issubclass(exc_type, StylesheetError):
            self.console.print(f"[red]Error:[/red] {exc_value}")
        elif issubclass(exc_type, ValueError):
            self.console.print(f"[red]Invalid configuration:[/red] {exc_value}")
        else:
            return False  # Let other exceptions propagate

        raise Exit(1)

    def _handle_compile_error(self, e: CompileError):
        self.console.print(f"[red]Compilation failed:[/red] {e.path or ''}")
        for line in e.details:
            self.console.print(f"  {line}", style="red", markup=False)

    def _handle_parse_error(self, e: ParseError):
        where = f"{e.path}:{e.line}" if e.line else e.path
        self.console.print(f"[red]Syntax error:[/red] {where}")

    def _handle_file_error(self, e: StylesheetError):
        if e.is_not_found:
            self.console.print(f"[red]File not found:[/red] {e.path}")
        else:
            self.console.print(f"[red]Cannot access file:[/red] {e}")
