"""filestat - point-in-time file status probe."""

__version__ = "0.1.0"
