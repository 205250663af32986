"""Subcommands registered on the clidoc root parser."""

from types import ModuleType
from typing import Dict

from . import docs, hello

COMMANDS: Dict[str, ModuleType] = {
    hello.NAME: hello,
    docs.NAME: docs,
}

__all__ = ["COMMANDS"]
