"""Parse and validate raw hourly snapshots into position records."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Any

from app.config import settings
from app.models.tracks import PositionRecord

logger = logging.getLogger("windtrack.parser")

ENTITY_PREFIX = "balloon"


def entity_id_for_index(index: int) -> str:
    """Label a snapshot row by its position.

    The feed has no persistent identifiers, so row ``index`` in one hour is
    treated as the same balloon as row ``index`` in every other hour. This is
    a heuristic and breaks whenever the feed reorders its rows.
    """

    return f"{ENTITY_PREFIX}-{index}"


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _to_float(value: Any) -> float | None:
    """Coerce a raw JSON value to a finite float, or None."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_row(row: Any, index: int, hours_ago: int) -> PositionRecord | None:
    if not _is_sequence(row) or len(row) < 2:
        return None

    lat = _to_float(row[0])
    lon = _to_float(row[1])
    if lat is None or lon is None:
        return None
    if lat < -90 or lat > 90 or lon < -180 or lon > 180:
        return None

    altitude = _to_float(row[2]) if len(row) > 2 else None

    return PositionRecord(
        entity_id=entity_id_for_index(index),
        latitude=lat,
        longitude=lon,
        altitude=altitude,
        hours_ago=hours_ago,
    )


def parse_snapshot(
    raw: Any, hours_ago: int, *, max_entities: int | None = None
) -> list[PositionRecord]:
    """Turn one hour's raw JSON into validated position records.

    Anything that is not a JSON array is treated as an empty snapshot. Rows at
    index ``max_entities`` or beyond are ignored before any validation.
    Malformed rows are dropped; this function does not raise on bad data.
    """

    if not _is_sequence(raw):
        if raw is not None:
            logger.debug(
                "Snapshot for hour %02d is %s, not a list; ignoring",
                hours_ago,
                type(raw).__name__,
            )
        return []

    cap = settings.snapshot_max_entities if max_entities is None else max_entities
    records: list[PositionRecord] = []
    for index, row in enumerate(raw[:cap]):
        record = parse_row(row, index, hours_ago)
        if record is not None:
            records.append(record)

    considered = min(len(raw), cap)
    if considered != len(records):
        logger.debug(
            "Hour %02d: kept %s of %s rows (%s dropped, %s beyond cap)",
            hours_ago,
            len(records),
            considered,
            considered - len(records),
            max(len(raw) - cap, 0),
        )
    return records


__all__ = ["ENTITY_PREFIX", "entity_id_for_index", "parse_row", "parse_snapshot"]
