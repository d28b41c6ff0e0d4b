"""Historical weather provider protocol and failure types."""

from __future__ import annotations

import datetime as dt
from typing import Optional, Protocol

from solarestimate.core.models import WeatherDataset


class FetchError(RuntimeError):
    """Weather source unreachable or answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ShapeError(ValueError):
    """Weather source payload does not match the expected schema."""


class HistoricalWeatherProvider(Protocol):
    """Interface for fetching daily historical weather."""

    def fetch_daily(
        self,
        latitude: float,
        longitude: float,
        start_date: str | dt.date,
        end_date: str | dt.date,
    ) -> WeatherDataset:
        """Return one point per day in [start_date, end_date] as reported upstream.

        Points carry total shortwave radiation (MJ/m²) and mean air temperature (°C).
        """
        ...


__all__ = ["HistoricalWeatherProvider", "FetchError", "ShapeError"]
