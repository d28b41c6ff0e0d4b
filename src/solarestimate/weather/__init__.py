"""Historical weather provider interfaces and implementations."""

from .base import FetchError, HistoricalWeatherProvider, ShapeError
from .open_meteo import OpenMeteoArchiveProvider, fetch_historical_daily

__all__ = [
    "HistoricalWeatherProvider",
    "FetchError",
    "ShapeError",
    "OpenMeteoArchiveProvider",
    "fetch_historical_daily",
]
