"""Hourly balloon snapshot ingestor for the WindBorne treasure feed."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Any, Iterable

import httpx

from app.config import settings

logger = logging.getLogger("windtrack.ingestors.snapshots")

MAX_HOURS_AGO = 23


def format_hour(hour: int) -> str:
    """Return the two-digit label the feed uses for an hour offset."""

    if hour < 0 or hour > MAX_HOURS_AGO:
        raise ValueError(f"hour offset must be within 0..{MAX_HOURS_AGO}, got {hour}")
    return f"{hour:02d}"


@dataclass
class HourSnapshot:
    """Raw outcome of fetching one hour; ``payload`` is None on failure."""

    hours_ago: int
    payload: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SnapshotFetcher:
    """Fetch raw hourly snapshots, isolating failures per hour."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        suffix: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.snapshot_base_url).rstrip("/")
        self.suffix = settings.snapshot_suffix if suffix is None else suffix
        self.timeout = timeout or settings.snapshot_timeout
        self.transport = transport

    def url_for(self, hour: int) -> str:
        return f"{self.base_url}/{format_hour(hour)}{self.suffix}"

    async def fetch_all(self, hours: Iterable[int] | None = None) -> list[HourSnapshot]:
        """Fetch every requested hour concurrently and wait for all of them.

        The result always holds one entry per requested hour, in hour order.
        """

        hour_list = sorted(set(range(settings.snapshot_hours) if hours is None else hours))
        for hour in hour_list:
            format_hour(hour)

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            outcomes = await asyncio.gather(
                *(self._fetch_with_client(client, hour) for hour in hour_list),
                return_exceptions=True,
            )

        results: list[HourSnapshot] = []
        for hour, outcome in zip(hour_list, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.warning(
                    "Snapshot request for hour %02d raised unexpectedly: %r",
                    hour,
                    outcome,
                )
                outcome = HourSnapshot(hours_ago=hour, error="unexpected error")
            results.append(outcome)

        failed = [result.hours_ago for result in results if not result.ok]
        if failed:
            logger.warning(
                "Snapshot fetch finished with %s/%s failed hours: %s",
                len(failed),
                len(results),
                failed,
            )
        else:
            logger.debug("Fetched all %s hourly snapshots", len(results))
        return results

    async def fetch_hour(self, hour: int) -> HourSnapshot:
        format_hour(hour)
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            return await self._fetch_with_client(client, hour)

    async def _fetch_with_client(
        self, client: httpx.AsyncClient, hour: int
    ) -> HourSnapshot:
        url = self.url_for(hour)
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("Snapshot request for hour %02d timed out: %s", hour, exc)
            return HourSnapshot(hours_ago=hour, error="timeout")
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Snapshot feed returned HTTP %s for hour %02d",
                exc.response.status_code,
                hour,
            )
            return HourSnapshot(
                hours_ago=hour, error=f"HTTP {exc.response.status_code}"
            )
        except httpx.RequestError as exc:
            logger.warning("Snapshot request for hour %02d failed: %s", hour, exc)
            return HourSnapshot(hours_ago=hour, error="request failed")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse snapshot JSON for hour %02d: %s", hour, exc)
            return HourSnapshot(hours_ago=hour, error="malformed body")

        return HourSnapshot(hours_ago=hour, payload=payload)


__all__ = ["HourSnapshot", "MAX_HOURS_AGO", "SnapshotFetcher", "format_hour"]
