"""Dependency acknowledgments for README files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Pattern, Set

from ..context import WorkingContext
from ..logging import get_logger
from ..models import DependencyEntry, ProjectDescriptor
from ..project import load_project_descriptor
from ..rendering import render_template
from ..scanner import FileScanner
from .options import AcknowledgmentOptions, TransformSettings, merge_options

TRANSFORM_NAME = "ACKNOWLEDGMENTS"
NO_DESCRIPTION = "No description available"
NO_USED_DEPENDENCIES = "_No declared dependencies are referenced in the project sources._"

_logger = get_logger("transforms.acknowledgments")


def resolve_acknowledgment_options(
    options: Mapping[str, Any] | None = None,
    settings: TransformSettings | None = None,
) -> AcknowledgmentOptions:
    defaults = AcknowledgmentOptions().as_dict()
    return AcknowledgmentOptions.from_mapping(
        merge_options(TRANSFORM_NAME, defaults, settings, options)
    )


def collect_dependencies(descriptor: ProjectDescriptor, *, include_dev: bool = True) -> List[str]:
    """Return declared dependency names sorted case-insensitively."""
    merged: Dict[str, str] = dict(descriptor.dependencies)
    if include_dev:
        merged.update(descriptor.dev_dependencies)
    return sorted(merged, key=lambda name: (name.lower(), name))


def usage_patterns(name: str) -> List[Pattern[str]]:
    """Patterns that count as a reference to ``name`` in project sources."""
    escaped = re.escape(name)
    patterns = [re.compile(rf"['\"`]{escaped}(?:/[^'\"`\s]*)?['\"`]")]
    segment = name.rsplit("/", 1)[-1]
    if segment != name:
        patterns.append(re.compile(rf"['\"`]{re.escape(segment)}['\"`]"))
    patterns.append(re.compile(rf"(?<![\w@/-]){escaped}(?![\w-])"))
    return patterns


def find_used_dependencies(
    names: Iterable[str], root: Path, scanner: FileScanner
) -> Set[str]:
    """Return the subset of ``names`` referenced by at least one scanned file."""
    remaining = {name: usage_patterns(name) for name in names}
    used: Set[str] = set()
    for path in scanner.iter_files(root):
        if not remaining:
            break
        try:
            text = path.read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            _logger.debug("Skipping unreadable file %s: %s", path, exc)
            continue
        for name in [name for name, patterns in remaining.items() if _matches(patterns, text)]:
            used.add(name)
            del remaining[name]
    return used


def _matches(patterns: Iterable[Pattern[str]], text: str) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def read_description(root: Path, name: str) -> str:
    """Read a dependency's description from its installed ``package.json``."""
    manifest = root / "node_modules" / name / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return NO_DESCRIPTION
    description = data.get("description") if isinstance(data, dict) else None
    if isinstance(description, str) and description.strip():
        return " ".join(description.split())
    return NO_DESCRIPTION


def is_important(name: str, allow_list: FrozenSet[str]) -> bool:
    """Match the full name, its final segment or its scope against ``allow_list``."""
    lowered = name.lower()
    candidates = {lowered, lowered.rsplit("/", 1)[-1]}
    if lowered.startswith("@") and "/" in lowered:
        candidates.add(lowered[1:].split("/", 1)[0])
    return bool(candidates & allow_list)


def render_acknowledgments(
    descriptor: ProjectDescriptor | None,
    options: Mapping[str, Any] | AcknowledgmentOptions | None = None,
    *,
    root: Path,
    scanner: FileScanner | None = None,
    settings: TransformSettings | None = None,
) -> str:
    """Render a bullet list crediting the project's dependencies."""
    if descriptor is None:
        return ""
    if not isinstance(options, AcknowledgmentOptions):
        options = resolve_acknowledgment_options(options, settings)

    names = collect_dependencies(descriptor, include_dev=options.include_dev)
    if not names:
        return ""

    if options.evaluate_used:
        used = find_used_dependencies(names, root, scanner or FileScanner())
        _logger.debug("Dependencies referenced in sources: %d of %d", len(used), len(names))
        names = [name for name in names if name in used]
        if not names:
            return NO_USED_DEPENDENCIES

    allow_list = (
        frozenset(item.lower() for item in options.important_packages)
        if options.highlight_important
        else frozenset()
    )
    entries = [
        DependencyEntry(
            name=name,
            description=read_description(root, name),
            important=is_important(name, allow_list),
        )
        for name in names
    ]
    return render_template("acknowledgments.md.j2", dependencies=entries)


def acknowledgments_transform(
    context: WorkingContext,
    options: Mapping[str, Any] | None = None,
    settings: TransformSettings | None = None,
) -> str:
    """``ACKNOWLEDGMENTS`` entry point: read ``package.json`` from the working directory."""
    descriptor = load_project_descriptor(context.cwd)
    return render_acknowledgments(descriptor, options, root=context.cwd, settings=settings)


__all__ = [
    "NO_DESCRIPTION",
    "NO_USED_DEPENDENCIES",
    "TRANSFORM_NAME",
    "acknowledgments_transform",
    "collect_dependencies",
    "find_used_dependencies",
    "is_important",
    "read_description",
    "render_acknowledgments",
    "resolve_acknowledgment_options",
    "usage_patterns",
]
