"""Open-Meteo historical archive provider."""

from __future__ import annotations

import datetime as dt
import math
from typing import Any, Dict, List

import pandas as pd
import requests

from solarestimate.core.debug import DebugCollector, NullDebugCollector
from solarestimate.core.models import WeatherDataPoint, WeatherDataset
from .base import FetchError, HistoricalWeatherProvider, ShapeError

RADIATION_VAR = "shortwave_radiation_sum"  # MJ/m² per day
TEMPERATURE_VAR = "temperature_2m_mean"  # °C


def _iso(value: str | dt.date) -> str:
    return value.isoformat() if isinstance(value, dt.date) else str(value)


def _finite_or_none(value: Any) -> float | None:
    try:
        fval = float(value)
    except (TypeError, ValueError):
        return None
    return fval if math.isfinite(fval) else None


class OpenMeteoArchiveProvider(HistoricalWeatherProvider):
    def __init__(
        self,
        base_url: str = "https://archive-api.open-meteo.com/v1/archive",
        debug: DebugCollector | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.base_url = base_url
        self.debug = debug or NullDebugCollector()
        self.session = session or requests.Session()
        self.timeout = timeout

    def _build_params(
        self, latitude: float, longitude: float, start_date: str | dt.date, end_date: str | dt.date
    ) -> Dict[str, str]:
        return {
            "latitude": str(latitude),
            "longitude": str(longitude),
            "start_date": _iso(start_date),
            "end_date": _iso(end_date),
            "daily": ",".join([RADIATION_VAR, TEMPERATURE_VAR]),
            "timezone": "UTC",
        }

    def _request(self, params: Dict[str, str]) -> Any:
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"Open-Meteo request failed: {exc}") from exc
        if not resp.ok:
            try:
                body = resp.text or ""
            except Exception:  # best-effort diagnostics only
                body = ""
            raise FetchError(
                f"Open-Meteo request failed ({resp.status_code}). {body}".strip(),
                status_code=resp.status_code,
                body=body,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise ShapeError("Open-Meteo response is not valid JSON") from exc

    def _parse_payload(
        self,
        payload: Any,
        latitude: float,
        longitude: float,
        start_date: str,
        end_date: str,
    ) -> WeatherDataset:
        # Validate every array before touching any values.
        if not isinstance(payload, dict):
            raise ShapeError("Unexpected Open-Meteo response shape (expected an object)")
        daily = payload.get("daily")
        if not isinstance(daily, dict) or not isinstance(daily.get("time"), list):
            raise ShapeError("Unexpected Open-Meteo response shape (missing daily.time)")
        times: List[str] = daily["time"]
        if not times:
            raise ShapeError("Open-Meteo daily.time is empty")
        radiation = daily.get(RADIATION_VAR)
        temperature = daily.get(TEMPERATURE_VAR)
        if not isinstance(radiation, list) or not isinstance(temperature, list):
            raise ShapeError(f"Open-Meteo daily arrays missing ({RADIATION_VAR}, {TEMPERATURE_VAR})")
        if len(radiation) != len(times) or len(temperature) != len(times):
            raise ShapeError(
                f"Open-Meteo daily arrays mismatched lengths: time={len(times)} "
                f"{RADIATION_VAR}={len(radiation)} {TEMPERATURE_VAR}={len(temperature)}"
            )

        try:
            days = [dt.date.fromisoformat(str(day)).isoformat() for day in times]
        except ValueError as exc:
            raise ShapeError("Open-Meteo daily.time contains a non-ISO date") from exc

        points = [
            WeatherDataPoint(date=day, shortwave_radiation_mj_m2=rad, temperature_c=temp)
            for day, rad, temp in zip(days, radiation, temperature)
        ]
        # Upstream snaps coordinates to its grid cell; echo what it reports.
        lat = payload.get("latitude")
        lon = payload.get("longitude")
        return WeatherDataset(
            latitude=float(lat) if lat is not None else latitude,
            longitude=float(lon) if lon is not None else longitude,
            start_date=start_date,
            end_date=end_date,
            points=points,
        )

    def _emit_summary(self, dataset: WeatherDataset) -> None:
        df = dataset.to_frame()
        rad = df["shortwave_radiation_mj_m2"]
        temp = df["temperature_c"]
        payload = {
            "radiation_min": _finite_or_none(rad.min()) if not df.empty else None,
            "radiation_max": _finite_or_none(rad.max()) if not df.empty else None,
            "radiation_missing": int(rad.isna().sum()),
            "temp_min": _finite_or_none(temp.min()) if not df.empty else None,
            "temp_max": _finite_or_none(temp.max()) if not df.empty else None,
        }
        ts = df.index[0] if not df.empty else None
        self.debug.emit("weather.summary", payload, ts=ts)

    def fetch_daily(
        self,
        latitude: float,
        longitude: float,
        start_date: str | dt.date,
        end_date: str | dt.date,
    ) -> WeatherDataset:
        params = self._build_params(latitude, longitude, start_date, end_date)
        self.debug.emit("weather.request", {"url": self.base_url, "params": params}, ts=params["start_date"])
        payload = self._request(params)
        dataset = self._parse_payload(payload, latitude, longitude, params["start_date"], params["end_date"])
        self.debug.emit(
            "weather.response_meta",
            {
                "lat": dataset.latitude,
                "lon": dataset.longitude,
                "elevation": payload.get("elevation"),
                "timezone": payload.get("timezone"),
                "points": len(dataset.points),
            },
            ts=dataset.points[0].date,
        )
        self._emit_summary(dataset)
        return dataset


def fetch_historical_daily(
    latitude: float,
    longitude: float,
    start_date: str | dt.date,
    end_date: str | dt.date,
    session: requests.Session | None = None,
) -> WeatherDataset:
    return OpenMeteoArchiveProvider(session=session).fetch_daily(latitude, longitude, start_date, end_date)


__all__ = ["OpenMeteoArchiveProvider", "fetch_historical_daily", "RADIATION_VAR", "TEMPERATURE_VAR"]
