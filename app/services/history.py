"""Fold per-hour position records into per-balloon histories."""

from __future__ import annotations

import logging
from typing import Iterable

from app.models.tracks import EntityHistory, PositionRecord

logger = logging.getLogger("windtrack.history")


def aggregate_histories(
    record_batches: Iterable[Iterable[PositionRecord]],
) -> EntityHistory:
    """Group records by entity and order each history oldest first.

    Ordering happens only after every batch has been folded in, so the order
    in which hours were fetched or resolved has no effect on the result.
    """

    histories: EntityHistory = {}
    for batch in record_batches:
        for record in batch:
            histories.setdefault(record.entity_id, []).append(record)

    for records in histories.values():
        records.sort(key=lambda record: record.hours_ago, reverse=True)

    if not histories:
        logger.warning("No balloon histories found after processing all hours")
    else:
        logger.debug("Aggregated %s balloon histories", len(histories))
    return histories


__all__ = ["aggregate_histories"]
