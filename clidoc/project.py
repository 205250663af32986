"""Project descriptor loading and repository coordinate parsing."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

from .logging import get_logger
from .models import ProjectDescriptor, RepoCoordinates

_GITHUB_PATTERN = re.compile(r"github\.com[:/](.+?)/?$", re.IGNORECASE)

_logger = get_logger("project")


def load_package_json(root: Path) -> Dict[str, Any]:
    """Return the parsed package.json contents or an empty dict."""
    package_json = root / "package.json"
    if not package_json.exists():
        return {}
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        _logger.debug("Ignoring unreadable %s: %s", package_json, exc)
        return {}
    if isinstance(data, dict):
        return data
    return {}


def load_project_descriptor(root: Path) -> Optional[ProjectDescriptor]:
    """Build a descriptor from ``root/package.json``; ``None`` when unavailable."""
    data = load_package_json(root)
    if not data:
        return None

    settings = data.get("config") if isinstance(data.get("config"), dict) else {}
    return ProjectDescriptor(
        name=_as_str(data.get("name")),
        version=_as_str(data.get("version")),
        license=_as_str(data.get("license")),
        repository=_as_repository(data.get("repository")),
        dependencies=_as_str_map(data.get("dependencies")),
        dev_dependencies=_as_str_map(data.get("devDependencies")),
        ci_workflow=_as_str(settings.get("ciWorkflow")),
        ci_branch=_as_str(settings.get("ciBranch")),
    )


def parse_repo_coordinates(repository: Any) -> Optional[RepoCoordinates]:
    """Extract GitHub coordinates from a URL, SCP address or ``{url}`` mapping."""
    if isinstance(repository, dict):
        repository = repository.get("url")
    if not isinstance(repository, str) or not repository:
        return None

    cleaned = re.sub(r"^git\+", "", repository.strip())
    cleaned = re.sub(r"\.git$", "", cleaned)
    match = _GITHUB_PATTERN.search(cleaned)
    if not match:
        return None
    parts = [part for part in match.group(1).split("/") if part]
    if len(parts) < 2:
        return None
    return RepoCoordinates(owner=parts[0], repo=parts[1])


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _as_repository(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("url"), str):
        return {"url": value["url"]}
    return None


def _as_str_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items()}


__all__ = ["load_package_json", "load_project_descriptor", "parse_repo_coordinates"]
