"""Option layering shared by the markdown transforms."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Tuple

from ..config import get_section

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

DEFAULT_IMPORTANT_PACKAGES: Tuple[str, ...] = (
    "express",
    "react",
    "vue",
    "typescript",
    "webpack",
    "vite",
    "rollup",
    "esbuild",
    "babel",
    "jest",
    "vitest",
    "eslint",
    "prettier",
    "commander",
)


def normalise_key(key: str) -> str:
    """Map ``collapseVisible`` and ``collapse_visible`` to ``collapse_visible``."""
    return _CAMEL_BOUNDARY.sub("_", key).replace("-", "_").lower()


def normalise_options(options: Mapping[str, Any] | None) -> Dict[str, Any]:
    return {normalise_key(str(key)): value for key, value in (options or {}).items()}


@dataclass(frozen=True)
class TransformSettings:
    """Caller-wide defaults keyed by transform name."""

    transform_defaults: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "TransformSettings":
        docs = get_section(config, "docs")
        raw = docs.get("transformDefaults", docs.get("transform_defaults"))
        if not isinstance(raw, dict):
            return cls()
        defaults = {
            str(name).upper(): value for name, value in raw.items() if isinstance(value, dict)
        }
        return cls(transform_defaults=defaults)

    def defaults_for(self, transform: str) -> Dict[str, Any]:
        for name, value in self.transform_defaults.items():
            if name.upper() == transform.upper():
                return normalise_options(value)
        return {}


def merge_options(
    transform: str,
    defaults: Mapping[str, Any],
    settings: TransformSettings | None,
    options: Mapping[str, Any] | None,
) -> Dict[str, Any]:
    """Layer built-in defaults, transform defaults and invocation options."""
    merged = normalise_options(defaults)
    if settings is not None:
        merged.update(settings.defaults_for(transform))
    merged.update(normalise_options(options))
    return merged


@dataclass(frozen=True)
class RenderOptions:
    """Badge rendering options after merging."""

    style: Optional[str] = None
    collapse: bool = False
    collapse_label: str = "More badges"
    collapse_visible: int = 3
    ci_workflow: str = "ci.yml"
    ci_branch: str = "main"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderOptions":
        base = cls()
        style = data.get("style")
        visible = _as_int(data.get("collapse_visible"))
        return cls(
            style=str(style) if style not in (None, "", False) else None,
            collapse=_as_bool(data.get("collapse"), base.collapse),
            collapse_label=_as_text(data.get("collapse_label"), base.collapse_label),
            collapse_visible=max(visible, 0) if visible is not None else base.collapse_visible,
            ci_workflow=_as_text(data.get("ci_workflow"), base.ci_workflow),
            ci_branch=_as_text(data.get("ci_branch"), base.ci_branch),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass(frozen=True)
class AcknowledgmentOptions:
    """Acknowledgments rendering options after merging."""

    include_dev: bool = True
    evaluate_used: bool = False
    highlight_important: bool = False
    important_packages: Tuple[str, ...] = DEFAULT_IMPORTANT_PACKAGES

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "AcknowledgmentOptions":
        base = cls()
        return cls(
            include_dev=_as_bool(data.get("include_dev"), base.include_dev),
            evaluate_used=_as_bool(data.get("evaluate_used"), base.evaluate_used),
            highlight_important=_as_bool(data.get("highlight_important"), base.highlight_important),
            important_packages=_as_names(data.get("important_packages"), base.important_packages),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_text(value: Any, default: str) -> str:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool) and str(value):
        return str(value)
    return default


def _as_names(value: Any, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if isinstance(item, (str, int)))
    return default


__all__ = [
    "AcknowledgmentOptions",
    "DEFAULT_IMPORTANT_PACKAGES",
    "RenderOptions",
    "TransformSettings",
    "merge_options",
    "normalise_key",
    "normalise_options",
]
