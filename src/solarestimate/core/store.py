"""Key-value persistence for the configuration and estimation result entries.

Entries are JSON strings matching ``Configuration.to_dict`` and
``EstimationResult.to_dict``. Readers treat absent or malformed entries as
"no data available" and return ``None``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from .models import Configuration, EstimationResult, ValidationError

CONFIG_KEY = "userConfiguration"
RESULT_KEY = "estimationResult"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    def __init__(self, entries: Dict[str, str] | None = None):
        self.entries: Dict[str, str] = dict(entries or {})

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value


class JsonFileStore:
    """Single JSON object on disk mapping keys to serialized entries."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError):
            return {}  # unreadable store reads as empty
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True))


def _load_entry(store: KeyValueStore, key: str) -> Any:
    raw = store.get(key)
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return None


def save_configuration(store: KeyValueStore, config: Configuration) -> None:
    store.set(CONFIG_KEY, json.dumps(config.to_dict()))


def load_configuration(store: KeyValueStore) -> Optional[Configuration]:
    data = _load_entry(store, CONFIG_KEY)
    if data is None:
        return None
    try:
        return Configuration.from_dict(data)
    except ValidationError:
        return None


def save_result(store: KeyValueStore, result: EstimationResult) -> None:
    store.set(RESULT_KEY, json.dumps(result.to_dict()))


def load_result(store: KeyValueStore) -> Optional[EstimationResult]:
    data = _load_entry(store, RESULT_KEY)
    if data is None:
        return None
    try:
        return EstimationResult.from_dict(data)
    except ValidationError:
        return None


__all__ = [
    "CONFIG_KEY",
    "RESULT_KEY",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "save_configuration",
    "load_configuration",
    "save_result",
    "load_result",
]
