"""Human-readable KPI summary of an estimation result."""
from __future__ import annotations

import math
from typing import Any, Dict, Optional

from solarestimate.core.models import EstimationResult

MISSING = "—"


def _fmt(value: Any, decimals: int = 0, suffix: str = "") -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return MISSING
    return f"{value:.{decimals}f}{suffix}"


def summarize(result: EstimationResult) -> Dict[str, Optional[float]]:
    return {
        "annual_kwh": result.annual_kwh,
        "avg_monthly_kwh": result.avg_monthly,
        "avg_daily_kwh": result.avg_daily,
        "optimal_tilt_deg": result.advisory.optimal_tilt_deg,
        "optimal_azimuth_deg": result.advisory.optimal_azimuth_deg,
    }


def format_summary(result: EstimationResult) -> str:
    s = summarize(result)
    lines = [
        f"Annual energy:      {_fmt(s['annual_kwh'])} kWh",
        f"Avg monthly energy: {_fmt(s['avg_monthly_kwh'])} kWh",
        f"Avg daily energy:   {_fmt(s['avg_daily_kwh'], 1)} kWh",
        f"Suggested tilt:     {_fmt(s['optimal_tilt_deg'], suffix='°')}",
        f"Suggested azimuth:  {_fmt(s['optimal_azimuth_deg'], suffix='°')}",
    ]
    if result.monthly_kwh:
        lines.append("Monthly (kWh):")
        lines.extend(f"  {month}: {kwh:.2f}" for month, kwh in result.monthly_kwh.items())
    return "\n".join(lines)


__all__ = ["summarize", "format_summary", "MISSING"]
