"""``clidoc docs``: refresh managed blocks in a markdown file."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Callable, Mapping

from ..context import WorkingContext
from ..docs import DocsProcessor

NAME = "docs"


def register(
    subparsers: argparse._SubParsersAction,
    add_global_options: Callable[..., None],
) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        NAME,
        help="Refresh BADGES and ACKNOWLEDGMENTS blocks in a markdown file.",
    )
    add_global_options(parser, suppress_default=True)
    parser.add_argument(
        "file",
        nargs="?",
        default="README.md",
        help="Markdown file to update (defaults to README.md in the current directory).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the diff without writing the file.",
    )
    return parser


def run(args: argparse.Namespace, config: Mapping[str, Any], context: WorkingContext) -> None:
    processor = DocsProcessor.from_config(context, config)
    dry_run = bool(getattr(args, "dry_run", False))
    result = processor.run(args.file, dry_run=dry_run)
    if result is None:
        message = f"{args.file} already up to date"
        if dry_run:
            message += " (dry-run)"
        print(message)
    elif dry_run:
        print(f"{args.file} changes (dry-run):")
        print(result.diff or "(no diff)")
    else:
        print(f"{_relativize(result.path, context.cwd)} updated")


def _relativize(path: Path, cwd: Path) -> str:
    try:
        return str(path.relative_to(cwd))
    except ValueError:
        return str(path)
