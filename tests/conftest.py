from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def in_project(project: ProjectBuilder, monkeypatch: pytest.MonkeyPatch) -> ProjectBuilder:
    """Run the test from inside the project with HOME pinned to it."""
    monkeypatch.chdir(project.root)
    monkeypatch.setenv("HOME", str(project.root.resolve()))
    return project
