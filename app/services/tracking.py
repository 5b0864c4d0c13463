"""Refresh orchestration and selection for balloon tracks."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
import logging
from typing import Optional

from app.config import settings
from app.ingestors import SnapshotFetcher, WeatherIngestor, WeatherLookupError
from app.models.tracks import PositionRecord, TrackSet
from app.models.weather import SelectionDetail
from app.services.history import aggregate_histories
from app.services.parser import parse_snapshot
from app.services.track_builder import build_tracks, compute_bounds

logger = logging.getLogger("windtrack.tracking")

LOADED_MESSAGE = "Loaded latest 24h of data."
FAILED_MESSAGE = "Failed to load data."


class TrackingService:
    """Owns the current TrackSet and rebuilds it on every refresh.

    Each refresh assembles a complete new TrackSet and then replaces the
    reference in one assignment, so readers see either the old or the new
    state and never a partial rebuild.
    """

    def __init__(
        self,
        fetcher: Optional[SnapshotFetcher] = None,
        weather_ingestor: Optional[WeatherIngestor] = None,
    ) -> None:
        self.fetcher = fetcher or SnapshotFetcher()
        self.weather_ingestor = weather_ingestor or WeatherIngestor()
        self._current = TrackSet()
        self._refresh_lock = asyncio.Lock()

    @property
    def current(self) -> TrackSet:
        return self._current

    async def refresh_now(self) -> TrackSet:
        """Rebuild all track state from a fresh fetch of every hour."""

        async with self._refresh_lock:
            try:
                track_set = await self._build_track_set()
            except Exception as exc:  # pragma: no cover - defensive logging
                logger.exception("Refresh failed unexpectedly: %s", exc)
                track_set = TrackSet(
                    status="failed",
                    message=FAILED_MESSAGE,
                    refreshed_at=datetime.now(tz=timezone.utc),
                )
            self._current = track_set

        logger.info(
            "Refresh complete: status=%s entities=%s tracks=%s failed_hours=%s",
            track_set.status,
            len(track_set.histories),
            len(track_set.tracks),
            len(track_set.hours_failed),
        )
        return track_set

    async def _build_track_set(self) -> TrackSet:
        snapshots = await self.fetcher.fetch_all()

        batches: list[list[PositionRecord]] = []
        hours_loaded: list[int] = []
        hours_failed: list[int] = []
        for snapshot in snapshots:
            if not snapshot.ok:
                hours_failed.append(snapshot.hours_ago)
                continue
            hours_loaded.append(snapshot.hours_ago)
            batches.append(parse_snapshot(snapshot.payload, snapshot.hours_ago))

        histories = aggregate_histories(batches)
        tracks = build_tracks(histories)

        return TrackSet(
            status="loaded" if histories else "failed",
            message=LOADED_MESSAGE if histories else FAILED_MESSAGE,
            histories=histories,
            tracks=tracks,
            bounds=compute_bounds(tracks),
            refreshed_at=datetime.now(tz=timezone.utc),
            hours_loaded=hours_loaded,
            hours_failed=hours_failed,
        )

    async def select(self, entity_id: str) -> SelectionDetail:
        """Build the detail view for a drawable track, enriched with weather.

        Raises KeyError when the entity has no drawable track in the current
        state. Weather failures are reported inside the detail.
        """

        track = self._current.track_for(entity_id)
        if track is None:
            raise KeyError(entity_id)

        latest = track.latest
        try:
            weather = await self.weather_ingestor.get_current_weather(
                latest.latitude, latest.longitude
            )
        except WeatherLookupError as exc:
            logger.warning("Weather unavailable for %s: %s", entity_id, exc)
            return SelectionDetail.build(entity_id, latest, weather_error=str(exc))

        return SelectionDetail.build(entity_id, latest, weather=weather)

    async def run_periodic(self, interval: float | None = None) -> None:
        """Refresh immediately, then on a fixed interval until cancelled."""

        delay = settings.refresh_interval_seconds if interval is None else interval
        while True:
            try:
                await self.refresh_now()
            except asyncio.CancelledError:
                logger.info("Refresh scheduler cancelled")
                raise
            except Exception as exc:  # pragma: no cover - defensive logging
                logger.warning("Scheduled refresh error: %s", exc)

            await asyncio.sleep(delay)


_default_service: TrackingService | None = None


def get_tracking_service() -> TrackingService:
    """Return the process-wide tracking service, creating it on first use."""

    global _default_service
    if _default_service is None:
        _default_service = TrackingService()
    return _default_service


__all__ = [
    "FAILED_MESSAGE",
    "LOADED_MESSAGE",
    "TrackingService",
    "get_tracking_service",
]
