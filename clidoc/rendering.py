"""Jinja2 environment for the markdown snippets clidoc emits."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    return Environment(
        loader=PackageLoader("clidoc", "templates"),
        autoescape=False,
        trim_blocks=True,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
    )


def render_template(name: str, **context: Any) -> str:
    """Render a bundled template without its trailing newline."""
    return get_environment().get_template(name).render(**context).rstrip("\n")


__all__ = ["get_environment", "render_template"]
