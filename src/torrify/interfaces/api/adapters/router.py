"""Adapter registry listing."""

from __future__ import annotations

from typing import cast

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from torrify.infrastructure.search.presenter import render_adapter_info
from torrify.interfaces.app_state import AppState

router = APIRouter(tags=["adapters"])


@router.get("/adapters")
async def list_adapters(
    request: Request,
    enabled_only: bool = Query(default=False, alias="enabledOnly"),
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    infos = state.list_adapters_uc.execute(enabled_only=enabled_only)
    return JSONResponse(
        content={
            "adapters": [render_adapter_info(i) for i in infos],
            "count": len(infos),
        }
    )
