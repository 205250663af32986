"""Command-line scaffold with cascading config and README transforms."""

__version__ = "0.1.0"
