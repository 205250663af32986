"""Logging utilities for clidoc commands."""

from __future__ import annotations

import logging

_LOGGER_NAME = "clidoc"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the clidoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    debug: bool = False,
    quiet: bool = False,
) -> logging.Logger:
    """Configure the clidoc logger with console output on stderr."""
    if verbose or debug:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI runs more than once.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[clidoc] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
