"""Models for balloon positions, histories and renderable tracks."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class PositionRecord(BaseModel):
    """One validated balloon position taken from an hourly snapshot.

    ``entity_id`` is derived from the row index inside the snapshot. The feed
    carries no persistent identifiers, so the same index in two snapshots is
    only assumed to be the same balloon; the label is not stable if the feed
    reorders or restructures its rows.
    """

    entity_id: str = Field(..., description="Opaque label derived from row index")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(
        ..., ge=-180, le=180, description="Longitude in decimal degrees"
    )
    altitude: Optional[float] = Field(
        default=None, description="Third snapshot field; None when unknown"
    )
    hours_ago: int = Field(..., ge=0, le=23, description="Snapshot offset, 0 = newest")

    model_config = ConfigDict(frozen=True)


EntityHistory = dict[str, list[PositionRecord]]


class BoundingRegion(BaseModel):
    """Smallest lat/lon box containing every drawable track point."""

    south: float
    west: float
    north: float
    east: float

    model_config = ConfigDict(frozen=True)


class Track(BaseModel):
    """Renderable polyline for one entity plus its latest observation."""

    entity_id: str
    points: list[tuple[float, float]] = Field(
        default_factory=list, description="(lat, lon) pairs, oldest first"
    )
    latest: PositionRecord

    model_config = ConfigDict(frozen=True)

    @property
    def drawable(self) -> bool:
        return len(self.points) >= 2


TrackStatus = Literal["pending", "loaded", "failed"]


class TrackSet(BaseModel):
    """Everything derived from one refresh cycle.

    A refresh always builds a new instance; it is never mutated in place.
    Histories and tracks are stored as tuples. Readers must not mutate the
    ``histories`` mapping itself.
    """

    status: TrackStatus = "pending"
    message: str = "Loading balloon tracks..."
    histories: dict[str, tuple[PositionRecord, ...]] = Field(default_factory=dict)
    tracks: tuple[Track, ...] = ()
    bounds: Optional[BoundingRegion] = None
    refreshed_at: Optional[datetime] = None
    hours_loaded: list[int] = Field(default_factory=list)
    hours_failed: list[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def track_for(self, entity_id: str) -> Track | None:
        for track in self.tracks:
            if track.entity_id == entity_id:
                return track
        return None


class TrackSummaryResponse(BaseModel):
    """Payload returned to the map view after a refresh."""

    status: TrackStatus
    message: str
    refreshed_at: Optional[datetime] = None
    entity_count: int = Field(..., description="Entities with at least one position")
    hours_loaded: list[int]
    hours_failed: list[int]
    bounds: Optional[BoundingRegion] = None
    tracks: list[Track]

    @classmethod
    def from_track_set(cls, track_set: TrackSet) -> "TrackSummaryResponse":
        return cls(
            status=track_set.status,
            message=track_set.message,
            refreshed_at=track_set.refreshed_at,
            entity_count=len(track_set.histories),
            hours_loaded=track_set.hours_loaded,
            hours_failed=track_set.hours_failed,
            bounds=track_set.bounds,
            tracks=track_set.tracks,
        )


class EntityHistoryResponse(BaseModel):
    entity_id: str
    drawable: bool
    records: list[PositionRecord]


__all__ = [
    "BoundingRegion",
    "EntityHistory",
    "EntityHistoryResponse",
    "PositionRecord",
    "Track",
    "TrackSet",
    "TrackStatus",
    "TrackSummaryResponse",
]
