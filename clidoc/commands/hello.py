"""``clidoc hello``: greet someone using cascaded defaults."""

from __future__ import annotations

import argparse
from typing import Any, Callable, Mapping

from ..config import get_section
from ..context import WorkingContext
from ..logging import get_logger
from ..resolve import resolve_value

NAME = "hello"
DESCRIPTION = "Say hello to someone"

_logger = get_logger("commands.hello")


def register(
    subparsers: argparse._SubParsersAction,
    add_global_options: Callable[..., None],
) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(NAME, help=DESCRIPTION, description=DESCRIPTION)
    add_global_options(parser, suppress_default=True)
    parser.add_argument(
        "name",
        nargs="?",
        default=None,
        help="Name to greet (falls back to hello.name in config, then 'world').",
    )
    parser.add_argument(
        "-t",
        "--title",
        default=None,
        metavar="<title>",
        help="Add a title before the name",
    )
    return parser


def run(args: argparse.Namespace, config: Mapping[str, Any], context: WorkingContext) -> None:
    section = get_section(config, "hello")
    name = resolve_value(args.name, section.get("name"), "world")
    title = resolve_value(args.title, section.get("title"), "")
    options = {**get_section(config, "globals"), "title": title}
    greet(name, options)


def format_greeting(name: Any, title: Any = "") -> str:
    words = " ".join(part for part in (str(title).strip(), str(name).strip()) if part)
    return f"Hello, {words}!"


def greet(name: Any, options: Mapping[str, Any]) -> None:
    if options.get("debug"):
        _logger.debug("Debug info: %s", {"name": name, "options": dict(options)})
    if not options.get("quiet"):
        print(format_greeting(name, options.get("title", "")))
