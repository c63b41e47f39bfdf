from . import compile, deps, serve, config

__all__ = ['compile', 'deps', 'serve', 'config']
