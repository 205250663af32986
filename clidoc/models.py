"""Core data models shared across clidoc transforms."""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class ProjectDescriptor:
    """Project metadata read once from ``package.json``."""

    name: Optional[str] = None
    version: Optional[str] = None
    license: Optional[str] = None
    repository: Union[str, Dict[str, str], None] = None
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    ci_workflow: Optional[str] = None
    ci_branch: Optional[str] = None


@dataclass(frozen=True)
class RepoCoordinates:
    """GitHub ``owner/repo`` pair parsed from a repository reference."""

    owner: str
    repo: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class BadgeEntry:
    """A single rendered badge keyed by a per-invocation unique identifier."""

    key: str
    markdown: str


@dataclass(frozen=True)
class DependencyEntry:
    """A dependency credited in the acknowledgments list."""

    name: str
    description: str
    important: bool = False

    @property
    def url(self) -> str:
        return f"https://www.npmjs.com/package/{self.name}"
