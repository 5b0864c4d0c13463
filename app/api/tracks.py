"""Track, selection and refresh endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.models import (
    EntityHistoryResponse,
    SelectionDetail,
    TrackSummaryResponse,
)
from app.services import TrackingService, get_tracking_service

router = APIRouter(prefix="/api/v1", tags=["tracks"])

logger = logging.getLogger("windtrack.api.tracks")


@router.get(
    "/tracks",
    response_model=TrackSummaryResponse,
    summary="Current balloon tracks and map bounds",
)
async def list_tracks(
    service: TrackingService = Depends(get_tracking_service),
) -> TrackSummaryResponse:
    return TrackSummaryResponse.from_track_set(service.current)


@router.post(
    "/refresh",
    response_model=TrackSummaryResponse,
    summary="Rebuild tracks from the last 24 hourly snapshots",
)
async def refresh_tracks(
    service: TrackingService = Depends(get_tracking_service),
) -> TrackSummaryResponse:
    """Trigger a refresh immediately instead of waiting for the scheduler."""

    track_set = await service.refresh_now()
    return TrackSummaryResponse.from_track_set(track_set)


@router.get(
    "/tracks/{entity_id}/history",
    response_model=EntityHistoryResponse,
    summary="Validated positions for one balloon",
)
async def get_history(
    entity_id: str,
    service: TrackingService = Depends(get_tracking_service),
) -> EntityHistoryResponse:
    current = service.current
    records = current.histories.get(entity_id)
    if records is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown balloon {entity_id}",
        )
    return EntityHistoryResponse(
        entity_id=entity_id,
        drawable=current.track_for(entity_id) is not None,
        records=records,
    )


@router.get(
    "/tracks/{entity_id}",
    response_model=SelectionDetail,
    summary="Latest position and current surface weather for one balloon",
)
async def select_track(
    entity_id: str,
    service: TrackingService = Depends(get_tracking_service),
) -> SelectionDetail:
    try:
        detail = await service.select(entity_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No drawable track for {entity_id}",
        )

    logger.info(
        "Selected %s (hours_ago=%s, weather=%s)",
        entity_id,
        detail.latest.hours_ago,
        "ok" if detail.weather is not None else "unavailable",
    )
    return detail
