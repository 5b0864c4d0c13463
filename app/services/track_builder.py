"""Build renderable tracks and the map bounding region from histories."""

from __future__ import annotations

from typing import Iterable, Sequence

from app.models.tracks import BoundingRegion, EntityHistory, PositionRecord, Track

MIN_TRACK_POINTS = 2


def latest_record(records: Sequence[PositionRecord]) -> PositionRecord:
    """Return the record with the smallest ``hours_ago``.

    The feed has hourly resolution only. When several records share the
    minimum, the first one in history order wins.
    """

    if not records:
        raise ValueError("cannot pick the latest record of an empty history")
    return min(records, key=lambda record: record.hours_ago)


def build_track(entity_id: str, records: Sequence[PositionRecord]) -> Track:
    return Track(
        entity_id=entity_id,
        points=[(record.latitude, record.longitude) for record in records],
        latest=latest_record(records),
    )


def build_tracks(histories: EntityHistory) -> list[Track]:
    """Build drawable tracks; entities with fewer than two points are skipped."""

    tracks: list[Track] = []
    for entity_id, records in histories.items():
        if len(records) < MIN_TRACK_POINTS:
            continue
        tracks.append(build_track(entity_id, records))
    return tracks


def compute_bounds(tracks: Iterable[Track]) -> BoundingRegion | None:
    lats: list[float] = []
    lons: list[float] = []
    for track in tracks:
        for lat, lon in track.points:
            lats.append(lat)
            lons.append(lon)

    if not lats:
        return None
    return BoundingRegion(
        south=min(lats), west=min(lons), north=max(lats), east=max(lons)
    )


__all__ = [
    "MIN_TRACK_POINTS",
    "build_track",
    "build_tracks",
    "compute_bounds",
    "latest_record",
]
