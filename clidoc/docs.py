"""Rewrites managed transform blocks inside markdown documents."""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .context import WorkingContext
from .logging import get_logger
from .markers import Directive, MarkerManager
from .transforms import TRANSFORMS, Transform
from .transforms.options import TransformSettings


@dataclass
class DocsOutcome:
    """Result of a docs update run."""

    path: Path
    diff: str
    dry_run: bool


class DocsProcessor:
    """Runs registered transforms for every directive in a document."""

    def __init__(
        self,
        context: WorkingContext,
        settings: TransformSettings | None = None,
        transforms: Mapping[str, Transform] | None = None,
        marker_manager: MarkerManager | None = None,
    ) -> None:
        self.context = context
        self.settings = settings or TransformSettings()
        self.transforms = dict(TRANSFORMS if transforms is None else transforms)
        self.marker_manager = marker_manager or MarkerManager()
        self.logger = get_logger("docs")

    @classmethod
    def from_config(cls, context: WorkingContext, config: Mapping[str, Any]) -> "DocsProcessor":
        return cls(context, TransformSettings.from_config(config))

    def render(self, markdown: str) -> str:
        """Return ``markdown`` with every known directive block refreshed."""
        return self.marker_manager.replace_blocks(markdown, self._render_directive)

    def run(self, path: str | Path, *, dry_run: bool = False) -> Optional[DocsOutcome]:
        """Refresh the document at ``path``; ``None`` when already up to date."""
        target = self.context.resolve(path)
        if not target.is_file():
            raise FileNotFoundError(f"Markdown file not found: {target}")

        self.logger.info("Refreshing managed blocks in %s", target)
        original = target.read_text(encoding="utf-8")
        updated = self.render(original)
        if updated == original:
            self.logger.debug("No changes for %s", target)
            return None

        diff = "".join(
            difflib.unified_diff(
                original.splitlines(keepends=True),
                updated.splitlines(keepends=True),
                fromfile=f"{target.name} (current)",
                tofile=f"{target.name} (updated)",
            )
        )
        if not dry_run:
            target.write_text(updated, encoding="utf-8")
        return DocsOutcome(path=target, diff=diff, dry_run=dry_run)

    def _render_directive(self, directive: Directive) -> Optional[str]:
        transform = self._lookup(directive.name)
        if transform is None:
            self.logger.warning("Unknown transform %s; leaving block untouched", directive.name)
            return None
        self.logger.debug("Rendering %s with %s", directive.name, directive.options)
        return transform(self.context, directive.options, self.settings)

    def _lookup(self, name: str) -> Optional[Transform]:
        return self.transforms.get(name.upper())


__all__ = ["DocsOutcome", "DocsProcessor"]
