"""Domain models for the energy estimation pipeline.

Provides validated value objects for the system configuration, the historical
weather series and the estimation result, plus their camelCase JSON shapes.
"""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd


class ValidationError(ValueError):
    """Raised when model inputs violate constraints."""


class InvalidConfigError(ValidationError):
    """Raised when a configuration is incomplete or out of bounds."""


# camelCase (serialized) and snake_case spellings both map onto dataclass fields.
_CONFIG_FIELDS = {
    "latitude": "latitude",
    "longitude": "longitude",
    "systemCapacityKwp": "system_capacity_kwp",
    "tiltDeg": "tilt_deg",
    "azimuthDeg": "azimuth_deg",
    "panelEfficiency": "panel_efficiency",
    "performanceRatio": "performance_ratio",
    "startDate": "start_date",
    "endDate": "end_date",
}
_DATE_FIELDS = {"start_date", "end_date"}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _parse_date(name: str, value: Any) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise InvalidConfigError(f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}") from exc


@dataclass(frozen=True)
class Configuration:
    latitude: float
    longitude: float
    system_capacity_kwp: float
    tilt_deg: float
    azimuth_deg: float
    panel_efficiency: float
    performance_ratio: float
    start_date: dt.date
    end_date: dt.date

    def __post_init__(self):
        # Normalize datetimes to calendar dates so range checks compare like types.
        for name in _DATE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, dt.datetime):
                object.__setattr__(self, name, value.date())
        self.validate()

    def validate(self) -> None:
        """Re-check presence and bounds; raises InvalidConfigError."""
        for name in _CONFIG_FIELDS.values():
            if getattr(self, name) is None:
                raise InvalidConfigError(f"{name} is required")
        for name in _CONFIG_FIELDS.values():
            if name in _DATE_FIELDS:
                value = getattr(self, name)
                if isinstance(value, dt.datetime) or not isinstance(value, dt.date):
                    raise InvalidConfigError(f"{name} must be a date")
            elif not _is_number(getattr(self, name)):
                raise InvalidConfigError(f"{name} must be a finite number")
        if not (-90.0 <= self.latitude <= 90.0):
            raise InvalidConfigError("Latitude must be between -90 and 90 degrees")
        if not (-180.0 <= self.longitude <= 180.0):
            raise InvalidConfigError("Longitude must be between -180 and 180 degrees")
        if self.system_capacity_kwp <= 0:
            raise InvalidConfigError("system_capacity_kwp must be positive")
        if not (0.0 <= self.tilt_deg <= 90.0):
            raise InvalidConfigError("Tilt must be between 0 and 90 degrees")
        if not (-180.0 <= self.azimuth_deg <= 180.0):
            raise InvalidConfigError("Azimuth must be between -180 and 180 degrees")
        if not (0 < self.panel_efficiency <= 1):
            raise InvalidConfigError("panel_efficiency must be in (0, 1]")
        if not (0 < self.performance_ratio <= 1):
            raise InvalidConfigError("performance_ratio must be in (0, 1]")
        if self.start_date > self.end_date:
            raise InvalidConfigError("start_date must not be after end_date")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Configuration":
        if not isinstance(raw, Mapping):
            raise InvalidConfigError("Configuration must be a mapping")
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            name = _CONFIG_FIELDS.get(key, key)
            if name in _CONFIG_FIELDS.values() and value is not None and value != "":
                values[name] = value
        missing = [name for name in _CONFIG_FIELDS.values() if name not in values]
        if missing:
            raise InvalidConfigError(f"Missing configuration fields: {missing}")
        for name, value in list(values.items()):
            if name in _DATE_FIELDS:
                values[name] = _parse_date(name, value)
                continue
            if isinstance(value, bool):
                raise InvalidConfigError(f"{name} must be numeric, got {value!r}")
            try:
                values[name] = float(value)
            except (TypeError, ValueError) as exc:
                raise InvalidConfigError(f"{name} must be numeric, got {value!r}") from exc
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, name in _CONFIG_FIELDS.items():
            value = getattr(self, name)
            data[key] = value.isoformat() if name in _DATE_FIELDS else value
        return data


def is_valid_configuration(raw: Configuration | Mapping[str, Any] | None) -> bool:
    """Boolean form of the configuration gate."""
    if raw is None:
        return False
    try:
        if isinstance(raw, Configuration):
            raw.validate()
        else:
            Configuration.from_dict(raw)
    except InvalidConfigError:
        return False
    return True


@dataclass(frozen=True)
class WeatherDataPoint:
    date: str
    shortwave_radiation_mj_m2: Optional[float] = None
    temperature_c: Optional[float] = None


@dataclass(frozen=True)
class WeatherDataset:
    latitude: float
    longitude: float
    start_date: str
    end_date: str
    points: List[WeatherDataPoint] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """Daily series as a DataFrame indexed by date."""
        index = pd.DatetimeIndex(pd.to_datetime([p.date for p in self.points]))
        df = pd.DataFrame(
            {
                "shortwave_radiation_mj_m2": pd.to_numeric(
                    pd.Series([p.shortwave_radiation_mj_m2 for p in self.points], dtype=object), errors="coerce"
                ).to_numpy(),
                "temperature_c": pd.to_numeric(
                    pd.Series([p.temperature_c for p in self.points], dtype=object), errors="coerce"
                ).to_numpy(),
            },
            index=index,
        )
        df.index.name = "date"
        return df


@dataclass(frozen=True)
class Advisory:
    optimal_tilt_deg: Optional[float] = None
    optimal_azimuth_deg: Optional[float] = None


def _kwh_map(raw: Any, label: str) -> Dict[str, float]:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"{label} must be an object")
    out: Dict[str, float] = {}
    for key, value in raw.items():
        if not _is_number(value):
            raise ValidationError(f"{label}[{key!r}] must be a finite number")
        out[str(key)] = float(value)
    return out


def _kwh_value(raw: Mapping[str, Any], key: str) -> float:
    value = raw.get(key)
    if not _is_number(value):
        raise ValidationError(f"{key} must be a finite number")
    return float(value)


@dataclass(frozen=True)
class EstimationResult:
    daily_kwh: Dict[str, float] = field(default_factory=dict)
    monthly_kwh: Dict[str, float] = field(default_factory=dict)
    annual_kwh: float = 0.0
    avg_daily: float = 0.0
    avg_monthly: float = 0.0
    advisory: Advisory = field(default_factory=Advisory)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dailyKWh": dict(self.daily_kwh),
            "monthlyKWh": dict(self.monthly_kwh),
            "annualKWh": self.annual_kwh,
            "avgDaily": self.avg_daily,
            "avgMonthly": self.avg_monthly,
            "advisory": {
                "optimalTiltDeg": self.advisory.optimal_tilt_deg,
                "optimalAzimuthDeg": self.advisory.optimal_azimuth_deg,
            },
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EstimationResult":
        if not isinstance(raw, Mapping):
            raise ValidationError("Estimation result must be an object")
        advisory_raw = raw.get("advisory") or {}
        if not isinstance(advisory_raw, Mapping):
            raise ValidationError("advisory must be an object")
        advisory = Advisory(
            optimal_tilt_deg=advisory_raw.get("optimalTiltDeg"),
            optimal_azimuth_deg=advisory_raw.get("optimalAzimuthDeg"),
        )
        return cls(
            daily_kwh=_kwh_map(raw.get("dailyKWh"), "dailyKWh"),
            monthly_kwh=_kwh_map(raw.get("monthlyKWh"), "monthlyKWh"),
            annual_kwh=_kwh_value(raw, "annualKWh"),
            avg_daily=_kwh_value(raw, "avgDaily"),
            avg_monthly=_kwh_value(raw, "avgMonthly"),
            advisory=advisory,
        )


__all__ = [
    "ValidationError",
    "InvalidConfigError",
    "Configuration",
    "is_valid_configuration",
    "WeatherDataPoint",
    "WeatherDataset",
    "Advisory",
    "EstimationResult",
]
