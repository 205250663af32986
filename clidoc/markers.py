"""Managed marker blocks that name a transform and its options."""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .logging import get_logger

_BEGIN_PATTERN = re.compile(
    r"<!--\s*clidoc:begin:(?P<name>[A-Za-z_][\w-]*)(?P<args>(?:(?!-->).)*?)\s*-->",
    re.DOTALL,
)

_INTEGER_PATTERN = re.compile(r"[+-]?(?:0|[1-9]\d*)")

_logger = get_logger("markers")


@dataclass
class Directive:
    """A transform block found in a markdown document."""

    name: str
    options: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    start: int = 0
    end: int = 0


class MarkerManager:
    """Finds and rewrites clidoc directive blocks."""

    def parse(self, markdown: str) -> List[Directive]:
        """Return directives in document order; unterminated blocks are ignored."""
        directives: List[Directive] = []
        fences = _fenced_ranges(markdown)
        position = 0
        while True:
            match = _BEGIN_PATTERN.search(markdown, position)
            if match is None:
                break
            if any(start <= match.start() < end for start, end in fences):
                position = match.end()
                continue
            name = match.group("name")
            end_pattern = re.compile(rf"<!--\s*clidoc:end:{re.escape(name)}\s*-->")
            end_match = end_pattern.search(markdown, match.end())
            if end_match is None:
                _logger.warning("Directive %s has no end marker; skipping", name)
                position = match.end()
                continue
            directives.append(
                Directive(
                    name=name,
                    options=parse_options(match.group("args")),
                    body=markdown[match.end() : end_match.start()].strip(),
                    start=match.end(),
                    end=end_match.start(),
                )
            )
            position = end_match.end()
        return directives

    def replace_blocks(
        self, markdown: str, render: Callable[[Directive], Optional[str]]
    ) -> str:
        """Replace each block body with ``render(directive)``; ``None`` keeps it."""
        pieces: List[str] = []
        position = 0
        for directive in self.parse(markdown):
            content = render(directive)
            if content is None:
                continue
            pieces.append(markdown[position : directive.start])
            pieces.append(f"\n{content.rstrip()}\n" if content.strip() else "\n")
            position = directive.end
        pieces.append(markdown[position:])
        return "".join(pieces)


def _fenced_ranges(markdown: str) -> List[Tuple[int, int]]:
    ranges: List[Tuple[int, int]] = []
    offset = 0
    fence_start: Optional[int] = None
    for line in markdown.splitlines(keepends=True):
        if line.strip().startswith("```"):
            if fence_start is None:
                fence_start = offset
            else:
                ranges.append((fence_start, offset + len(line)))
                fence_start = None
        offset += len(line)
    if fence_start is not None:
        ranges.append((fence_start, offset))
    return ranges


def parse_options(args: str) -> Dict[str, Any]:
    """Parse ``key=value`` pairs; bare keys are ``True``."""
    try:
        tokens = shlex.split(args)
    except ValueError:
        _logger.warning("Unbalanced quotes in directive options: %s", args.strip())
        tokens = args.split()

    options: Dict[str, Any] = {}
    for token in tokens:
        key, separator, raw = token.partition("=")
        if not key:
            continue
        options[key] = _coerce(raw) if separator else True
    return options


def _coerce(raw: str) -> Any:
    # Only booleans and plain integers are typed; "1.10" or "no" stay strings.
    lowered = raw.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if _INTEGER_PATTERN.fullmatch(raw):
        return int(raw)
    return raw


__all__ = ["Directive", "MarkerManager", "parse_options"]
