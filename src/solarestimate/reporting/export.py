"""CSV export of daily estimates."""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from solarestimate.core.models import Configuration, EstimationResult

EXPORT_COLUMNS = ["date", "kWh"]


def build_daily_frame(result: EstimationResult) -> pd.DataFrame:
    """One row per daily_kwh entry, in insertion order."""
    return pd.DataFrame(
        {"date": list(result.daily_kwh.keys()), "kWh": list(result.daily_kwh.values())},
        columns=EXPORT_COLUMNS,
    )


def export_csv(result: EstimationResult, config: Configuration) -> str:
    """Header rows echoing location and period, a blank line, then the date,kWh table."""
    header = [
        ("latitude", config.latitude),
        ("longitude", config.longitude),
        ("startDate", config.start_date.isoformat()),
        ("endDate", config.end_date.isoformat()),
    ]
    lines = [f"{key},{value}" for key, value in header]
    table = build_daily_frame(result).to_csv(index=False, float_format="%.2f", lineterminator="\n")
    return "\n".join(lines) + "\n\n" + table


def write_csv(path: str | Path, result: EstimationResult, config: Configuration) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_csv(result, config))
    return path


__all__ = ["EXPORT_COLUMNS", "build_daily_frame", "export_csv", "write_csv"]
