"""Configuration loader for estimation runs.

Supports YAML and JSON files holding a flat mapping of configuration fields
(snake_case or camelCase) plus an optional ``run`` section.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

try:
    import yaml
except ModuleNotFoundError as exc:  # pragma: no cover - defensive import
    raise ImportError("PyYAML is required to load YAML configs") from exc

from .models import Configuration


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or parsed."""


def _load_raw(path: Path) -> Dict[str, Any]:
    text = path.read_text()
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            raw = yaml.safe_load(text) or {}
        elif path.suffix.lower() == ".json":
            raw = json.loads(text)
        else:
            raise ConfigError(f"Unsupported config extension: {path.suffix}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a mapping of configuration fields")
    return raw


def load_configuration(path: str | Path) -> Configuration:
    """Read and validate a configuration file.

    Raises ConfigError for unreadable files and InvalidConfigError when the
    fields are missing or out of bounds.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    raw = _load_raw(path)
    return Configuration.from_dict(raw)


def load_run_section(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        return {}
    run = _load_raw(path).get("run") or {}
    if not isinstance(run, dict):
        raise ConfigError("'run' section must be a mapping")
    return run


def write_configuration(path: str | Path, config: Configuration, run: Dict[str, Any] | None = None) -> None:
    """Persist configuration while preserving a ``run`` section already in the file."""

    path = Path(path)
    base: Dict[str, Any] = {}
    if path.exists():
        try:
            existing_run = load_run_section(path)
        except ConfigError:
            existing_run = {}
        if existing_run:
            base["run"] = existing_run
    data = config.to_dict()
    data.update(base)
    if run is not None:
        data["run"] = run

    if path.suffix.lower() in {".yaml", ".yml"}:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, sort_keys=False))
    elif path.suffix.lower() == ".json":
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, sort_keys=False))
    else:
        raise ConfigError(f"Unsupported config extension: {path.suffix}")


__all__ = [
    "ConfigError",
    "load_configuration",
    "load_run_section",
    "write_configuration",
]
