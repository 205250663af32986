"""Tests for clidoc.config."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from clidoc.config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    ConfigSearchResult,
    discover_config,
    get_section,
    load_config,
    load_default_config,
)
from clidoc.context import WorkingContext


def _context(root: Path) -> WorkingContext:
    return WorkingContext(cwd=root.resolve(), env={"HOME": str(root.resolve())})


def _no_discovery(_: WorkingContext) -> None:
    return None


def test_inline_json_config_is_parsed(tmp_path: Path) -> None:
    config = load_config(
        '  {"hello": {"name": "X", "title": "Y"}}  ',
        context=_context(tmp_path),
        discover=_no_discovery,
    )
    assert config == {"hello": {"name": "X", "title": "Y"}}


def test_inline_json_config_invalid_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Invalid JSON passed to --config"):
        load_config('{"hello": ', context=_context(tmp_path))


def test_missing_config_file_raises_with_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found") as excinfo:
        load_config("missing.yml", context=_context(tmp_path))
    assert str(tmp_path.resolve() / "missing.yml") in str(excinfo.value)


def test_config_file_resolved_relative_to_context(tmp_path: Path) -> None:
    config_dir = tmp_path / "conf"
    config_dir.mkdir()
    (config_dir / "app.yml").write_text("hello:\n  name: RelName\n  title: Prof.\n", encoding="utf-8")

    config = load_config("conf/app.yml", context=_context(tmp_path))

    assert config["hello"] == {"name": "RelName", "title": "Prof."}


@pytest.mark.parametrize(
    ("filename", "content"),
    [
        ("settings.json", json.dumps({"hello": {"name": "Json"}})),
        ("settings.toml", '[hello]\nname = "Json"\n'),
        (".clidocrc", '{"hello": {"name": "Json"}}'),
    ],
)
def test_config_file_formats(tmp_path: Path, filename: str, content: str) -> None:
    (tmp_path / filename).write_text(content, encoding="utf-8")
    config = load_config(filename, context=_context(tmp_path))
    assert config["hello"]["name"] == "Json"


def test_malformed_config_file_raises(tmp_path: Path) -> None:
    (tmp_path / "broken.yml").write_text("hello: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to load config file"):
        load_config("broken.yml", context=_context(tmp_path))


def test_non_mapping_config_file_raises(tmp_path: Path) -> None:
    (tmp_path / "list.yml").write_text("- one\n- two\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="expected a mapping"):
        load_config("list.yml", context=_context(tmp_path))


def test_python_config_requires_opt_in(tmp_path: Path) -> None:
    (tmp_path / "config.py").write_text("config = {'hello': {'name': 'Code'}}\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="--allow-code-config"):
        load_config("config.py", context=_context(tmp_path))

    config = load_config("config.py", context=_context(tmp_path), allow_code=True)
    assert config["hello"]["name"] == "Code"


def test_discovered_config_wins_over_default(tmp_path: Path) -> None:
    found = ConfigSearchResult(config={"hello": {"name": "Found"}}, filepath=tmp_path / ".clidocrc")

    config = load_config(
        None,
        context=_context(tmp_path),
        discover=lambda _: found,
        default_provider=lambda: {"hello": {"name": "Default"}},
    )

    assert config["hello"]["name"] == "Found"


def test_default_provider_used_when_nothing_discovered(tmp_path: Path) -> None:
    config = load_config(
        None,
        context=_context(tmp_path),
        discover=_no_discovery,
        default_provider=lambda: {"hello": {"name": "Default"}},
    )
    assert config["hello"]["name"] == "Default"


def test_empty_discovery_result_falls_back_to_default(tmp_path: Path) -> None:
    empty = ConfigSearchResult(config=None, filepath=tmp_path / ".clidocrc")
    config = load_config(
        None,
        context=_context(tmp_path),
        discover=lambda _: empty,
        default_provider=lambda: {"source": "default"},
    )
    assert config == {"source": "default"}


def test_flags_are_shallow_merged_last(tmp_path: Path) -> None:
    config = load_config(
        '{"hello": {"name": "X"}, "verbose": false, "docs": {"a": 1}}',
        flags={"verbose": True, "docs": "flag"},
        context=_context(tmp_path),
    )
    assert config["verbose"] is True
    assert config["docs"] == "flag"
    assert config["hello"] == {"name": "X"}


def test_discover_walks_up_to_parent_directories(tmp_path: Path) -> None:
    (tmp_path / ".clidocrc.json").write_text('{"hello": {"name": "Parent"}}', encoding="utf-8")
    child = tmp_path / "a" / "b"
    child.mkdir(parents=True)

    result = discover_config(WorkingContext(cwd=child, env={}), stop_dir=tmp_path)

    assert result is not None
    assert result.filepath == tmp_path.resolve() / ".clidocrc.json"
    assert result.config == {"hello": {"name": "Parent"}}


def test_discover_prefers_package_json_field(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"name": "pkg", "clidoc": {"hello": {"name": "FromPackage"}}}),
        encoding="utf-8",
    )
    (tmp_path / ".clidocrc.yml").write_text("hello:\n  name: FromRc\n", encoding="utf-8")

    result = discover_config(_context(tmp_path))

    assert result is not None
    assert result.config == {"hello": {"name": "FromPackage"}}


def test_discover_skips_package_json_without_field(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(json.dumps({"name": "pkg"}), encoding="utf-8")
    (tmp_path / "pyproject.toml").write_text(
        '[tool.clidoc.hello]\nname = "FromPyproject"\n', encoding="utf-8"
    )

    result = discover_config(_context(tmp_path))

    assert result is not None
    assert result.filepath.name == "pyproject.toml"
    assert result.config == {"hello": {"name": "FromPyproject"}}


def test_discover_stops_at_stop_dir(tmp_path: Path) -> None:
    (tmp_path / ".clidocrc.json").write_text('{"hello": {"name": "Above"}}', encoding="utf-8")
    project = tmp_path / "project"
    project.mkdir()

    assert discover_config(WorkingContext(cwd=project, env={}), stop_dir=project) is None
    assert discover_config(_context(project)) is None


def test_discover_raises_on_malformed_file(tmp_path: Path) -> None:
    (tmp_path / ".clidocrc.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match=r"\.clidocrc\.json"):
        discover_config(_context(tmp_path))


def test_bundled_default_config_is_loaded() -> None:
    assert DEFAULT_CONFIG_PATH.exists()
    config = load_default_config()
    assert config["hello"] == {"name": "Ion", "title": "Mr."}


def test_missing_default_config_is_empty(tmp_path: Path) -> None:
    assert load_default_config(tmp_path / "missing.yml") == {}


def test_get_section_ignores_non_mappings() -> None:
    assert get_section({"hello": {"name": "X"}}, "hello") == {"name": "X"}
    assert get_section({"hello": "X"}, "hello") == {}
    assert get_section({}, "hello") == {}
