"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from teraplay.infrastructure.config import AppConfig
from teraplay.interfaces.app_state import AppState
from teraplay.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


def _add_health_route(app: FastAPI) -> None:
    @app.get(f"{API_PREFIX}/healthz")
    async def healthz() -> dict[str, str | list[str]]:
        """Liveness probe listing the variants with a strategy chain."""
        orchestrator = getattr(app.state, "orchestrator", None)
        variants = orchestrator.supported_variants if orchestrator is not None else []
        return {"status": "ok", "variants": [v.value for v in variants]}


def _add_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
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
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000.0, 2),
            )


def create_app(config: AppConfig) -> FastAPI:
    """Create the FastAPI app: configuration only, no resource initialization.

    The HTTP client and strategy chains are created in lifespan().
    """
    app = FastAPI(
        title="Teraplay",
        description="Resolves Terabox share links to streamable media URLs",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state = AppState()
    app.state.config = config

    from teraplay.interfaces.api.resolve.router import router as resolve_router

    app.include_router(resolve_router, prefix=API_PREFIX)
    _add_health_route(app)
    _add_request_logging(app)
    return app
