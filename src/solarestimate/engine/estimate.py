"""Daily/monthly/annual energy estimation from a historical weather series."""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Dict, Iterable, Mapping

from solarestimate.core.debug import DebugCollector, NullDebugCollector
from solarestimate.core.models import (
    Advisory,
    Configuration,
    EstimationResult,
    InvalidConfigError,
    WeatherDataset,
)
from solarestimate.weather.base import HistoricalWeatherProvider

MJ_PER_KWH = 3.6

# Enough digits to quantize any finite float to cents.
_ROUNDING_CONTEXT = Context(prec=400)


def round2(value: float) -> float:
    """Round half-up to 2 decimals on the value's shortest decimal form."""
    return float(Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP, context=_ROUNDING_CONTEXT))


def _irradiance(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        fval = float(value)
    except (TypeError, ValueError):
        return None
    return fval if math.isfinite(fval) else None


def mj_to_kwh(mj_m2: Any) -> float:
    """Convert daily irradiance MJ/m² → kWh/m²; missing or non-numeric becomes 0."""
    return (_irradiance(mj_m2) or 0.0) / MJ_PER_KWH


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def _coerce_config(config: Configuration | Mapping[str, Any]) -> Configuration:
    if isinstance(config, Configuration):
        config.validate()
        return config
    if isinstance(config, Mapping):
        return Configuration.from_dict(config)
    raise InvalidConfigError(f"Unsupported configuration type: {type(config).__name__}")


def aggregate_monthly(daily_kwh: Mapping[str, float]) -> Dict[str, float]:
    """Sum daily values per YYYY-MM in first-seen order.

    The running total is rounded after every addition, so the result can differ
    by a cent from rounding a single final sum.
    """
    monthly: Dict[str, float] = {}
    for day, kwh in daily_kwh.items():
        month = day[:7]
        monthly[month] = round2(monthly.get(month, 0.0) + kwh)
    return monthly


def estimate_energy(
    dataset: WeatherDataset,
    config: Configuration | Mapping[str, Any],
    debug: DebugCollector | None = None,
) -> EstimationResult:
    """Estimate energy output for every day in ``dataset``.

    Capacity-based model: E_day = G_kWh/m² × system_capacity_kwp × performance_ratio.
    Panel efficiency is carried on the configuration but does not enter the
    formula; capacity is taken as already net of it.
    """
    cfg = _coerce_config(config)
    debug = debug or NullDebugCollector()

    daily_kwh: Dict[str, float] = {}
    missing_days = 0
    for point in dataset.points:
        if _irradiance(point.shortwave_radiation_mj_m2) is None:
            missing_days += 1
        g_kwh_m2 = mj_to_kwh(point.shortwave_radiation_mj_m2)
        daily_kwh[point.date] = round2(g_kwh_m2 * cfg.system_capacity_kwp * cfg.performance_ratio)

    monthly_kwh = aggregate_monthly(daily_kwh)
    annual_kwh = round2(sum(monthly_kwh.values()))

    result = EstimationResult(
        daily_kwh=daily_kwh,
        monthly_kwh=monthly_kwh,
        annual_kwh=annual_kwh,
        avg_daily=round2(_mean(daily_kwh.values())),
        avg_monthly=round2(_mean(monthly_kwh.values())),
        # Placeholder: echoes the configured orientation, not a computed optimum.
        advisory=Advisory(optimal_tilt_deg=cfg.tilt_deg, optimal_azimuth_deg=cfg.azimuth_deg),
    )
    debug.emit(
        "estimate.summary",
        {
            "days": len(daily_kwh),
            "months": len(monthly_kwh),
            "missing_irradiance_days": missing_days,
            "annual_kwh": result.annual_kwh,
            "avg_daily_kwh": result.avg_daily,
            "avg_monthly_kwh": result.avg_monthly,
        },
        ts=dataset.start_date,
    )
    return result


def run_estimation(
    config: Configuration | Mapping[str, Any],
    provider: HistoricalWeatherProvider | None = None,
    debug: DebugCollector | None = None,
) -> EstimationResult:
    """Fetch the configured date range and estimate it.

    FetchError, ShapeError and InvalidConfigError propagate to the caller.
    """
    cfg = _coerce_config(config)
    debug = debug or NullDebugCollector()
    if provider is None:
        from solarestimate.weather.open_meteo import OpenMeteoArchiveProvider

        provider = OpenMeteoArchiveProvider(debug=debug)
    dataset = provider.fetch_daily(cfg.latitude, cfg.longitude, cfg.start_date, cfg.end_date)
    return estimate_energy(dataset, cfg, debug=debug)


__all__ = ["MJ_PER_KWH", "round2", "mj_to_kwh", "aggregate_monthly", "estimate_energy", "run_estimation"]
