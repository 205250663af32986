"""Explicit process context shared by config loading and transforms."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


@dataclass(frozen=True)
class WorkingContext:
    """Working directory and environment a single invocation runs against."""

    cwd: Path
    env: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_process(cls) -> "WorkingContext":
        return cls(cwd=Path.cwd(), env=dict(os.environ))

    @classmethod
    def for_path(cls, path: str | Path, env: Mapping[str, str] | None = None) -> "WorkingContext":
        return cls(cwd=Path(path).expanduser().resolve(), env=dict(env or {}))

    @property
    def home(self) -> Path | None:
        raw = self.env.get("HOME") or self.env.get("USERPROFILE")
        return Path(raw) if raw else None

    def resolve(self, path: str | Path) -> Path:
        """Resolve ``path`` relative to the context's working directory."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.cwd / candidate
        return candidate.resolve()


__all__ = ["WorkingContext"]
