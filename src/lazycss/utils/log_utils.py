"""Logging helpers."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "lazycss"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(debug: bool = False, console: Console | None = None) -> logging.Logger:
    """
    Attach a rich handler to the ``lazycss`` logger

    Calling it again only updates the level.

    :param debug: Log every staleness check event if True, only warnings otherwise
    :param console: Console to log to (defaults to stderr)
    :return: The configured logger
    """
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console or Console(stderr=True),
                              show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    return logger


def log_event(message: str, arg: object) -> None:
    """Log one engine event, e.g. ``log_event("rendering", output_path)``."""
    logger.debug("%s: %s", message, arg)
