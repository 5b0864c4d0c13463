"""Pydantic models for the windtrack backend."""

from .tracks import (
    BoundingRegion,
    EntityHistory,
    EntityHistoryResponse,
    PositionRecord,
    Track,
    TrackSet,
    TrackSummaryResponse,
)
from .weather import CurrentWeather, SelectionDetail

__all__ = [
    "BoundingRegion",
    "CurrentWeather",
    "EntityHistory",
    "EntityHistoryResponse",
    "PositionRecord",
    "SelectionDetail",
    "Track",
    "TrackSet",
    "TrackSummaryResponse",
]
