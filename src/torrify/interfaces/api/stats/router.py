"""Cache statistics and runtime metrics."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from torrify.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/cache")
async def cache_stats(request: Request) -> JSONResponse:
    """Return response cache size, bounds and hit rate."""
    state = cast(AppState, request.app.state)
    return JSONResponse(content=await state.cache.stats())


@router.delete("/cache")
async def clear_cache(request: Request) -> JSONResponse:
    """Drop every cached response."""
    state = cast(AppState, request.app.state)
    cleared = len(await state.cache.keys())
    await state.cache.clear()
    log.info("cache_cleared_via_api", entries=cleared)
    return JSONResponse(content={"cleared": cleared})


@router.get("/metrics")
async def metrics(request: Request) -> JSONResponse:
    """Return in-memory runtime metrics.

    Includes search counts, cache hits and per-adapter search stats.
    """
    state = cast(AppState, request.app.state)
    return JSONResponse(content=state.metrics.snapshot())
