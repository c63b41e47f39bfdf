from .app import app
from . import commands  # noqa: F401  (registers the commands)

__all__ = ['app', 'main']


def main():
    app()
