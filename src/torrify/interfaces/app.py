"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from torrify.infrastructure.config import AppConfig
from torrify.interfaces.app_state import AppState
from torrify.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app: configuration ONLY, NO resource initialization.

    Resources (HTTP client, cache, adapters) are created in lifespan().
    """
    app = FastAPI(
        title="Torrify",
        description="Torrent search aggregator across multiple public indexes",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from torrify.interfaces.api.adapters.router import router as adapters_router
    from torrify.interfaces.api.search.router import router as search_router
    from torrify.interfaces.api.stats.router import router as stats_router

    app.include_router(search_router, prefix="/api/v1")
    app.include_router(adapters_router, prefix="/api/v1")
    app.include_router(stats_router, prefix="/api/v1")

    @app.get("/api/v1/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe: returns 200 as long as the process is running."""
        adapters = getattr(app.state, "adapters", None)
        return {
            "status": "ok",
            "adapters": len(adapters.all_enabled()) if adapters else 0,
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
