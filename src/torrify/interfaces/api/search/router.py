"""Aggregated search endpoint."""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from torrify.domain.entities import InputError, SearchParams
from torrify.infrastructure.search.presenter import render_search_json
from torrify.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["search"])

CACHE_CONTROL = "public, max-age=60, s-maxage=60"


def _split_sources(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _parse_limit(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise InputError(f"limit must be an integer, got {raw!r}") from None


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get("/search")
async def search(
    request: Request,
    q: str = Query(default="", description="Search phrase (min. 2 characters)."),
    sources: str | None = Query(
        default=None, description="Comma-separated adapter names or keys."
    ),
    category: str | None = Query(default=None, description="Category filter."),
    sort_by: str = Query(default="seeds", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    limit: str | None = Query(default=None, description="Max results (1..max)."),
) -> JSONResponse:
    """Search every selected adapter and return merged, ranked results.

    Adapter failures are reported in ``perSourceStats`` and never fail the
    request. Bad input yields 400, internal faults 500.
    """
    state = cast(AppState, request.app.state)

    try:
        params = SearchParams(
            query=q,
            sources=_split_sources(sources),
            category=category or None,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=_parse_limit(limit),
        )
        response = await state.search_uc.execute(params)
    except InputError as exc:
        log.info("search_rejected", query=q, error=str(exc))
        return _error_response(400, str(exc))
    except Exception as exc:  # noqa: BLE001
        log.exception("search_failed", query=q)
        if state.config.environment == "prod":
            return _error_response(500, "internal error")
        return JSONResponse(
            status_code=500,
            content={"error": "internal error", "detail": str(exc)},
        )

    return JSONResponse(
        content=render_search_json(response),
        headers={"Cache-Control": CACHE_CONTROL},
    )
