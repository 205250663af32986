"""Value precedence for command arguments and options."""

from __future__ import annotations

from typing import TypeVar

T = TypeVar("T")


def resolve_value(explicit: T | None, configured: T | None, fallback: T) -> T:
    """Return the first value that is not ``None``.

    Precedence (highest to lowest):
    1. Explicit value passed on the command line
    2. Value from the cascaded configuration
    3. Hardcoded fallback

    Only ``None`` falls through; ``0``, ``""`` and ``False`` are kept.
    """
    if explicit is not None:
        return explicit
    if configured is not None:
        return configured
    return fallback


__all__ = ["resolve_value"]
