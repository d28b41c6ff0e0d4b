"""Deterministic debug collectors for structured JSON events."""
from __future__ import annotations

import datetime as _dt
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Protocol


class DebugCollector(Protocol):
    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None) -> None:
        ...


def _json_safe_scalar(val: Any) -> Any:
    """Convert dates and non-finite floats to JSON-safe values."""
    if isinstance(val, (_dt.datetime, _dt.date, _dt.time)):
        return val.isoformat()
    if hasattr(val, "isoformat"):
        try:
            return val.isoformat()
        except (TypeError, ValueError):
            return str(val)
    if isinstance(val, float) and not math.isfinite(val):
        return None
    return val


def _ordered(obj: Any) -> Any:
    """Recursively order mappings for deterministic JSON dumps."""
    if isinstance(obj, dict):
        return {k: _ordered(obj[k]) for k in sorted(obj)}
    if isinstance(obj, (list, tuple)):
        return [_ordered(v) for v in obj]
    return _json_safe_scalar(obj)


def _event(stage: str, payload: Dict[str, Any], ts: Any) -> Dict[str, Any]:
    return {"stage": stage, "ts": _json_safe_scalar(ts), "payload": _ordered(payload)}


class NullDebugCollector:
    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None) -> None:  # noqa: D401
        """Discard events (no-op)."""
        return


@dataclass
class ListDebugCollector:
    events: List[Dict[str, Any]] = field(default_factory=list)

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None) -> None:
        self.events.append(_event(stage, payload, ts))

    def stages(self) -> List[str]:
        return [e["stage"] for e in self.events]


class JsonlDebugWriter:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None) -> None:
        with self.path.open("a", encoding="utf-8") as fh:
            json.dump(_event(stage, payload, ts), fh, sort_keys=True)
            fh.write("\n")


class JsonDebugWriter:
    """Collect all events in memory then write a single JSON array.

    Used when callers pass a ``--debug`` path ending with ``.json`` so one file
    holds every stage payload of a run. Call ``finalize`` once the run is done.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._events: List[Dict[str, Any]] = []

    def emit(self, stage: str, payload: Dict[str, Any], *, ts: Any = None) -> None:
        self._events.append(_event(stage, payload, ts))

    def finalize(self) -> None:
        self.path.write_text(json.dumps(self._events, indent=2, sort_keys=True))


def build_debug_collector(path: str | Path | None) -> DebugCollector:
    """Factory: None → NullDebugCollector, .json → JsonDebugWriter, otherwise JSONL."""
    if path is None:
        return NullDebugCollector()
    if str(path).lower().endswith(".json"):
        return JsonDebugWriter(path)
    return JsonlDebugWriter(path)


__all__ = [
    "DebugCollector",
    "NullDebugCollector",
    "ListDebugCollector",
    "JsonlDebugWriter",
    "JsonDebugWriter",
    "build_debug_collector",
]
