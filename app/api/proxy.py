"""Pass-through proxy for single hours of the upstream snapshot feed."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.config import settings
from app.ingestors.snapshots import MAX_HOURS_AGO

router = APIRouter(prefix="/api", tags=["proxy"])

logger = logging.getLogger("windtrack.api.proxy")


@router.get("/hour/{hour}", summary="Relay one hour of the snapshot feed")
async def proxy_hour(hour: str) -> JSONResponse:
    """Forward /api/hour/HH to the upstream feed and relay its JSON."""

    if not (hour.isascii() and hour.isdigit()) or int(hour) > MAX_HOURS_AGO:
        return JSONResponse(
            status_code=404, content={"error": f"Unknown hour {hour}"}
        )

    label = hour.zfill(2)
    upstream_url = f"{settings.upstream_feed_url.rstrip('/')}/{label}.json"

    try:
        async with httpx.AsyncClient(timeout=settings.upstream_timeout) as client:
            response = await client.get(upstream_url)
        if response.status_code >= 400:
            return JSONResponse(
                status_code=response.status_code,
                content={"error": f"Upstream returned {response.status_code}"},
            )
        data = response.json()
    except (httpx.RequestError, ValueError) as exc:
        logger.error("Proxy error for hour %s: %s", label, exc)
        return JSONResponse(status_code=500, content={"error": "Proxy server error"})

    return JSONResponse(content=data)
