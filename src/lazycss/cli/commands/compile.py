from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from ..app import app, app_state
from ..utils.error_handler import StylesheetErrorHandler
from ...core.compiler import CompilationService

__all__ = []

console = Console()


# noinspection PyShadowingBuiltins
@app.command()
def compile(
        source: Path = typer.Argument(
            ..., file_okay=True, dir_okay=False,
            help="Path to the stylesheet (.scss extension)"
        ),
        output: Path | None = typer.Option(
            None, "--output", "-o",
            help="Output CSS file path (defaults to same name with .css extension)"
        ),
        compress: bool | None = typer.Option(
            None, "--compress/--no-compress",
            help="Minify the output (overrides configuration file)"
        ),
        force: bool = typer.Option(
            False, "--force", "-f",
            help="Force recompilation even if output file is up-to-date"
        ),
):
    """
    Compile a stylesheet if it, or anything it imports, changed since the last compilation.
    """
    with StylesheetErrorHandler(console):
        config = app_state.load_config(compress=compress)

        # Ensure source extension
        if source.suffix != config.source_ext:
            source = source.with_suffix(config.source_ext)

        # Determine output path
        if output is None:
            output = source.with_suffix(config.output_ext)

        service = CompilationService(config)

        # Check if compilation is needed (smart compilation)
        if not force and not service.needs_compilation_sync(source, output):
            console.print(f"[green]✓[/green] Output file is up-to-date: {output}")
            console.print("[dim]Use --force to recompile anyway[/dim]")
            return

        with Progress(
                SpinnerColumn(finished_text="[green]✓"),
                TextColumn("[progress.description]{task.description}"),
                console=console
        ) as progress:
            task = progress.add_task("Compiling stylesheet...", total=1)

            result = service.compile_file_sync(source, output, force=True)

            progress.update(task, completed=1)

        console.print(f"The compiled stylesheet is located at: [cyan]{result.output_path}[/cyan]")
