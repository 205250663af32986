"""Project file enumeration for dependency usage checks."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterator

from .logging import get_logger

MAX_FILE_BYTES = 200 * 1024

_EXCLUDED_DIRS = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".venv",
        "node_modules",
        "bower_components",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".cache",
        ".next",
        ".idea",
        "build",
        "dist",
        "coverage",
    }
)

# Manifests and lockfiles list every dependency by name.
_EXCLUDED_FILES = frozenset(
    {
        "package.json",
        "package-lock.json",
        "npm-shrinkwrap.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        ".DS_Store",
        "Thumbs.db",
    }
)

_TEXT_SUFFIXES = frozenset(
    {
        ".js",
        ".cjs",
        ".mjs",
        ".jsx",
        ".ts",
        ".cts",
        ".mts",
        ".tsx",
        ".vue",
        ".svelte",
        ".json",
        ".html",
        ".css",
        ".scss",
        ".yml",
        ".yaml",
        ".toml",
        ".py",
        ".sh",
    }
)

_logger = get_logger("scanner")


@dataclass(frozen=True)
class FileScanner:
    """Walks a project tree yielding text files worth searching."""

    max_bytes: int = MAX_FILE_BYTES
    excluded_dirs: FrozenSet[str] = _EXCLUDED_DIRS
    excluded_files: FrozenSet[str] = _EXCLUDED_FILES
    suffixes: FrozenSet[str] = field(default=_TEXT_SUFFIXES)

    def iter_files(self, root: Path) -> Iterator[Path]:
        """Yield candidate files under ``root``; walk errors are skipped."""
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._log_walk_error):
            dirnames[:] = sorted(name for name in dirnames if name not in self.excluded_dirs)
            current_dir = Path(dirpath)
            for filename in sorted(filenames):
                if filename in self.excluded_files:
                    continue
                path = current_dir / filename
                if path.suffix.lower() not in self.suffixes:
                    continue
                try:
                    size = path.stat().st_size
                except OSError:
                    continue
                if size > self.max_bytes:
                    continue
                yield path

    @staticmethod
    def _log_walk_error(error: OSError) -> None:
        _logger.debug("Skipping unreadable directory: %s", error)


__all__ = ["FileScanner", "MAX_FILE_BYTES"]
