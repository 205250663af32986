"""Cascading configuration loading for clidoc."""

from __future__ import annotations

import json
import runpy
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import yaml

from .context import WorkingContext
from .logging import get_logger

DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.config.yml")

_logger = get_logger("config")


class ConfigError(RuntimeError):
    """Raised when a requested configuration cannot be loaded."""


@dataclass(frozen=True)
class ConfigSearchResult:
    """Configuration found by upward discovery."""

    config: Optional[Dict[str, Any]]
    filepath: Path


Discover = Callable[[WorkingContext], Optional[ConfigSearchResult]]
DefaultProvider = Callable[[], Dict[str, Any]]


def search_places(name: str = "clidoc") -> tuple[str, ...]:
    """File names checked in each directory during discovery, in order."""
    return (
        "package.json",
        f".{name}rc",
        f".{name}rc.json",
        f".{name}rc.yaml",
        f".{name}rc.yml",
        f"{name}.config.json",
        f"{name}.config.yaml",
        f"{name}.config.yml",
        "pyproject.toml",
    )


def load_config(
    explicit: str | None = None,
    *,
    flags: Mapping[str, Any] | None = None,
    context: WorkingContext | None = None,
    discover: Discover | None = None,
    default_provider: DefaultProvider | None = None,
    allow_code: bool = False,
) -> Dict[str, Any]:
    """Return the cascaded configuration with ``flags`` overlaid last.

    Order, first success wins: inline JSON in ``explicit``, a file path in
    ``explicit``, upward discovery, the bundled default configuration.
    """
    context = context or WorkingContext.from_process()
    discover = discover or discover_config
    default_provider = default_provider or load_default_config

    if explicit is not None and explicit.strip():
        config = _load_explicit(explicit, context, allow_code=allow_code)
    else:
        result = discover(context)
        if result is not None and result.config is not None:
            _logger.debug("Using configuration discovered at %s", result.filepath)
            config = result.config
        else:
            _logger.debug("No configuration discovered; using bundled defaults")
            config = default_provider()

    merged: Dict[str, Any] = dict(config)
    if flags:
        merged.update(flags)
    return merged


def _load_explicit(explicit: str, context: WorkingContext, *, allow_code: bool) -> Dict[str, Any]:
    text = explicit.strip()
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON passed to --config: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("Invalid JSON passed to --config: expected an object")
        _logger.debug("Using inline JSON configuration")
        return data

    path = context.resolve(text)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    data = load_config_file(path, allow_code=allow_code)
    _logger.debug("Using configuration file %s", path)
    return data or {}


def load_config_file(
    path: Path, *, name: str = "clidoc", allow_code: bool = False
) -> Optional[Dict[str, Any]]:
    """Parse a configuration file, returning ``None`` when it holds no config."""
    try:
        data = _read_document(path, name=name, allow_code=allow_code)
    except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config file: {path}: {exc}") from exc

    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to load config file: {path}: expected a mapping at the root")
    return data


def _read_document(path: Path, *, name: str, allow_code: bool) -> Any:
    if path.suffix == ".py":
        return _run_code_config(path, allow_code=allow_code)

    text = path.read_text(encoding="utf-8")
    if path.name == "package.json":
        return _as_dict(json.loads(text)).get(name)
    if path.name == "pyproject.toml":
        tool = _as_dict(tomllib.loads(text).get("tool"))
        return tool.get(name)
    if not text.strip():
        return None
    if path.suffix == ".json":
        return json.loads(text)
    if path.suffix == ".toml":
        return tomllib.loads(text)
    return yaml.safe_load(text)


def _run_code_config(path: Path, *, allow_code: bool) -> Any:
    if not allow_code:
        raise ConfigError(
            f"Failed to load config file: {path}: Python configs execute code; "
            "pass --allow-code-config to load them"
        )
    _logger.warning("Executing Python configuration %s", path)
    try:
        namespace = runpy.run_path(str(path))
    except Exception as exc:
        raise ConfigError(f"Failed to load config file: {path}: {exc}") from exc
    return namespace.get("config")


def discover_config(
    context: WorkingContext,
    *,
    name: str = "clidoc",
    stop_dir: Path | None = None,
) -> Optional[ConfigSearchResult]:
    """Search ``context.cwd`` and its parents for a configuration file."""
    current = context.cwd.resolve()
    stop = stop_dir.resolve() if stop_dir is not None else _default_stop_dir(current, context.home)

    while True:
        for filename in search_places(name):
            candidate = current / filename
            if not candidate.is_file():
                continue
            config = load_config_file(candidate, name=name)
            if config is None:
                continue
            return ConfigSearchResult(config=config, filepath=candidate)

        if stop is not None and current == stop:
            break
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _default_stop_dir(start: Path, home: Path | None) -> Path | None:
    if home is None:
        return None
    home = home.expanduser().resolve()
    if start.is_relative_to(home):
        return home
    return None


def load_default_config(path: Path = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """Return the bundled default configuration, or an empty mapping."""
    if not path.exists():
        return {}
    return load_config_file(path) or {}


def get_section(config: Mapping[str, Any], key: str) -> Dict[str, Any]:
    """Return ``config[key]`` when it is a mapping, else an empty dict."""
    return _as_dict(config.get(key))


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


__all__ = [
    "ConfigError",
    "ConfigSearchResult",
    "DEFAULT_CONFIG_PATH",
    "discover_config",
    "get_section",
    "load_config",
    "load_config_file",
    "load_default_config",
    "search_places",
]
