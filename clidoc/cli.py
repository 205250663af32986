"""CLI entrypoints for clidoc commands."""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .commands import COMMANDS
from .config import ConfigError, load_config
from .context import WorkingContext
from .logging import configure_logging


def _add_global_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    def _default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=_default(False),
        help="Enable verbose output",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=_default(False),
        help="Enable debug mode",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=_default(False),
        help="Suppress output",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="<fileOrJson>",
        default=_default(None),
        help="Path to config file or JSON string",
    )
    parser.add_argument(
        "--allow-code-config",
        action="store_true",
        default=_default(False),
        help="Allow --config to point at a Python file (executes it).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clidoc",
        description="Command-line scaffold with cascading config and README transforms.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_global_options(parser)
    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    for name in sorted(COMMANDS):
        COMMANDS[name].register(subparsers, _add_global_options)
    help_parser = subparsers.add_parser("help", help="Display help for a command.")
    help_parser.add_argument("topic", nargs="?", metavar="<command>", help="Command to describe.")
    help_parser.set_defaults(command_parsers=subparsers.choices)
    return parser


def _print_command_help(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.topic is None:
        parser.print_help()
        parser.exit(0)
    target = args.command_parsers.get(args.topic)
    if target is None:
        parser.exit(1, f"Unknown command: {args.topic}\n")
    target.print_help()
    parser.exit(0)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for clidoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    flags = {
        "verbose": bool(args.verbose),
        "debug": bool(args.debug),
        "quiet": bool(args.quiet),
        "config": args.config,
    }
    configure_logging(verbose=flags["verbose"], debug=flags["debug"], quiet=flags["quiet"])

    if args.command is None:
        parser.print_help()
        parser.exit(0)
    if args.command == "help":
        _print_command_help(parser, args)

    context = WorkingContext.from_process()
    try:
        config = load_config(
            args.config,
            flags=flags,
            context=context,
            allow_code=bool(args.allow_code_config),
        )
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    config["globals"] = {
        "verbose": flags["verbose"],
        "debug": flags["debug"],
        "quiet": flags["quiet"],
    }

    try:
        COMMANDS[args.command].run(args, config, context)
    except FileNotFoundError as exc:
        parser.exit(1, f"{exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
