"""Data ingestors for windtrack."""

from .snapshots import HourSnapshot, SnapshotFetcher, format_hour
from .weather import WeatherIngestor, WeatherLookupError

__all__ = [
    "HourSnapshot",
    "SnapshotFetcher",
    "WeatherIngestor",
    "WeatherLookupError",
    "format_hour",
]
