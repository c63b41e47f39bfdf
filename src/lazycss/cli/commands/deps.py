from pathlib import Path

import typer
from rich.console import Console
from rich.tree import Tree

from ..app import app, app_state
from ..utils.error_handler import StylesheetErrorHandler
from ...core.imports import ImportGraphExtractor, find_imports
from ...stylesheet.models import Stylesheet

__all__ = []

console = Console()


def _add_branches(tree: Tree, stylesheet: Stylesheet, base_dir: Path):
    for node in stylesheet.imports:
        path = Path(node.path) if Path(node.path).is_absolute() else base_dir / node.path
        branch = tree.add(f"[cyan]{node.path}[/cyan] [dim](line {node.line})[/dim]")
        _add_branches(branch, node.subtree, path.parent)


@app.command()
def deps(
        source: Path = typer.Argument(
            ..., file_okay=True, dir_okay=False,
            help="Path to the stylesheet (.scss extension)"
        ),
        flat: bool = typer.Option(
            False, "--flat",
            help="Only print the dependency paths, one per line"
        ),
):
    """
    Show the files a stylesheet imports, directly or through other imports.

    Imports which can't be resolved to a file (plain CSS, missing files) are not listed.
    """
    with StylesheetErrorHandler(console):
        config = app_state.load_config()
        source = source.absolute()
        extractor = ImportGraphExtractor(source_ext=config.source_ext)
        stylesheet = extractor.parse(str(source))

    files = find_imports(stylesheet, str(source.parent))
    if flat:
        for path in files:
            console.print(path, markup=False, highlight=False, soft_wrap=True)
        return

    tree = Tree(f"[bold]{source}[/bold]")
    _add_branches(tree, stylesheet, source.parent)
    console.print(tree)
    console.print(f"[dim]{len(files)} dependenc{'y' if len(files) == 1 else 'ies'}[/dim]")
