"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from teraplay.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from teraplay.application.use_cases import ResolveShareUseCase
    from teraplay.infrastructure.strategies import RelayHint, StrategyOrchestrator


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Last known working relay per relay family (resettable)
    html_relay_hint: RelayHint
    api_relay_hint: RelayHint

    # Resolution
    orchestrator: StrategyOrchestrator
    resolve_share_uc: ResolveShareUseCase
