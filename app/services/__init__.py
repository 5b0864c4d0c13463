"""Service-layer helpers for the windtrack backend."""

from .history import aggregate_histories
from .parser import entity_id_for_index, parse_snapshot
from .track_builder import build_tracks, compute_bounds, latest_record
from .tracking import TrackingService, get_tracking_service

__all__ = [
    "TrackingService",
    "aggregate_histories",
    "build_tracks",
    "compute_bounds",
    "entity_id_for_index",
    "get_tracking_service",
    "latest_record",
    "parse_snapshot",
]
