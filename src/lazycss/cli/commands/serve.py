from pathlib import Path

import typer
import uvicorn
from rich.console import Console
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import Mount
from starlette.staticfiles import StaticFiles

from ..app import app, app_state
from ..utils.error_handler import StylesheetErrorHandler
from ...middleware import StylesheetMiddleware
from ...stylesheet.config import StylesheetConfig

__all__ = ['create_app']

console = Console()


def create_app(config: StylesheetConfig) -> Starlette:
    """
    Build an application serving ``output_root`` with on-demand stylesheet compilation

    :param config: The middleware configuration
    :return: The Starlette application
    """
    Path(config.output_root).mkdir(parents=True, exist_ok=True)
    return Starlette(
        routes=[Mount("/", app=StaticFiles(directory=config.output_root), name="static")],
        middleware=[Middleware(StylesheetMiddleware, config=config)],
    )


@app.command()
def serve(
        host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
        port: int = typer.Option(8000, "--port", "-p", help="Port to bind"),
        source_dir: Path | None = typer.Option(
            None, "--src", file_okay=False,
            help="Directory of the .scss files"
        ),
        output_dir: Path | None = typer.Option(
            None, "--dst", file_okay=False,
            help="Directory to store the .css files into (defaults to --src)"
        ),
        output_root: Path | None = typer.Option(
            None, "--dst-root", file_okay=False,
            help="Public root, set it if --dst is not the served root"
        ),
        force: bool | None = typer.Option(
            None, "--force/--no-force",
            help="Recompile on every request"
        ),
):
    """
    Serve a directory over HTTP, compiling stylesheets when they are requested.
    """
    with StylesheetErrorHandler(console):
        config = app_state.load_config(
            source_dir=source_dir and str(source_dir),
            output_dir=output_dir and str(output_dir),
            output_root=output_root and str(output_root),
            force=force,
        )
        application = create_app(config)

    console.print(f"Serving [cyan]{config.output_root}[/cyan] "
                  f"(sources: [cyan]{config.source_dir}[/cyan]) on http://{host}:{port}")
    uvicorn.run(application, host=host, port=port, log_level="debug" if config.debug else "info")
