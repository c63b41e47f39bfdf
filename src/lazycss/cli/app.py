from dataclasses import dataclass
from pathlib import Path

import typer

from ..stylesheet.config import StylesheetConfig, ConfigManager
from ..utils.log_utils import configure_logging

__all__ = ['app', 'app_state', 'AppState']


@dataclass
class AppState:
    config_path: Path | None = None
    debug: bool = False

    def load_config(self, **overrides) -> StylesheetConfig:
        """
        Load the configuration and apply command line overrides

        Overrides with a None value are ignored.
        """
        config = ConfigManager.load_config(self.config_path)
        overrides = {k: v for k, v in overrides.items() if v is not None}
        if self.debug:
            overrides['debug'] = True
        if overrides:
            config = StylesheetConfig(**{**config.to_dict(), **overrides})
        return config


app_state = AppState()

app = typer.Typer(
    name="lazycss",
    help="Compile SCSS stylesheets to CSS, only when they are out of date.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main(
        config: Path | None = typer.Option(
            None, "--config", "-C", dir_okay=False,
            help="Configuration file (defaults to ./lazycss.toml, then ~/.lazycss/config.toml)",
            envvar="LAZYCSS_CONFIG"
        ),
        debug: bool = typer.Option(
            False, "--debug", "-d",
            help="Log every staleness check"
        ),
):
    app_state.config_path = config
    app_state.debug = debug
    configure_logging(debug)
