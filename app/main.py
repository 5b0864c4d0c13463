from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from app.api import api_router
from app.config import settings
from app.services import get_tracking_service

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("windtrack")

@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    # ----- Startup logic -----
    if settings.enable_refresh_scheduler:
        service = get_tracking_service()
        app.state.refresh_task = asyncio.create_task(
            service.run_periodic(settings.refresh_interval_seconds)
        )
        logger.info(
            "Refresh scheduler started (every %.0f s)",
            settings.refresh_interval_seconds,
        )
    else:
        logger.info("Refresh scheduler disabled; use POST /api/v1/refresh")

    try:
        yield
    finally:
        # ----- Shutdown logic -----
        task = getattr(app.state, "refresh_task", None)
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


app = FastAPI(title="windtrack Backend", lifespan=lifespan)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "windtrack backend is running"}
