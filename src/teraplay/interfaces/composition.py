"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from teraplay.application.use_cases import ResolveShareUseCase
from teraplay.infrastructure.config.schema import AppConfig
from teraplay.infrastructure.share import build_share_reference
from teraplay.infrastructure.strategies import RelayHint, build_orchestrator
from teraplay.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def create_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Shared client for relays, APIs and verification (no retry transport)."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
    )


def wire_resolution(
    state: AppState, config: AppConfig, http_client: httpx.AsyncClient
) -> None:
    """Attach relay hints, orchestrator and use case to *state*."""
    state.html_relay_hint = RelayHint()
    state.api_relay_hint = RelayHint()

    state.orchestrator = build_orchestrator(
        http_client,
        config.resolver,
        http_timeout=config.http_timeout_seconds,
        verify_timeout=config.verify_timeout_seconds,
        html_hint=state.html_relay_hint,
        api_hint=state.api_relay_hint,
    )
    state.resolve_share_uc = ResolveShareUseCase(
        build_reference=build_share_reference,
        resolve_fn=state.orchestrator.resolve,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP client (shared by every strategy)
        2. Relay hints + strategy orchestrator
        3. Resolve use case
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client
    state.http_client = create_http_client(config)
    log.info(
        "http_client_initialized",
        timeout_seconds=config.http_timeout_seconds,
        verify_timeout_seconds=config.verify_timeout_seconds,
    )

    # 2) + 3) Strategy chains and use case
    wire_resolution(state, config, state.http_client)
    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")
        log.info("app_shutdown_complete")
