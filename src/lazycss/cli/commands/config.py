"""Configuration commands."""
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ..app import app, app_state
from ..utils.error_handler import StylesheetErrorHandler
from ...stylesheet.config import StylesheetConfig, ConfigManager

__all__ = []

console = Console()
config_app = typer.Typer(help="Show or create the lazycss configuration.")
app.add_typer(config_app, name="config")


@config_app.command()
def show():
    """Show the effective configuration."""
    with StylesheetErrorHandler(console):
        config = app_state.load_config()

    table = Table(title="lazycss configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    for key, value in config.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)


@config_app.command()
def init(
        path: Path | None = typer.Argument(
            None, dir_okay=False,
            help="Where to write the configuration (defaults to ./lazycss.toml)"
        ),
        source_dir: Path = typer.Option(Path("."), "--src", file_okay=False,
                                        help="Directory of the .scss files"),
        output_dir: Path | None = typer.Option(None, "--dst", file_okay=False,
                                               help="Directory of the .css files"),
        compress: bool = typer.Option(False, "--compress", help="Minify the output"),
        overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing file"),
):
    """Write a configuration file."""
    path = path or ConfigManager.get_default_config_path()
    if path.exists() and not overwrite:
        console.print(f"[yellow]Configuration file already exists:[/yellow] {path}")
        console.print("[dim]Use --overwrite to replace it[/dim]")
        raise typer.Exit(1)

    with StylesheetErrorHandler(console):
        config = StylesheetConfig(
            source_dir=str(source_dir),
            output_dir=str(output_dir) if output_dir else "",
            compress=compress,
        )
        saved = ConfigManager.save_config(config, path)

    console.print(f"[green]✓[/green] Configuration saved to [cyan]{saved}[/cyan]")
