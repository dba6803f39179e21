"""Resolution strategies for Terabox share links."""

from __future__ import annotations

from teraplay.infrastructure.strategies.direct_url import DirectUrlStrategy
from teraplay.infrastructure.strategies.html_scrape import HtmlScrapeStrategy
from teraplay.infrastructure.strategies.mirrored_api import (
    MirroredApiStrategy,
    ShortUrlInfoStrategy,
)
from teraplay.infrastructure.strategies.orchestrator import StrategyOrchestrator
from teraplay.infrastructure.strategies.registry import (
    build_orchestrator,
    build_strategy_chains,
)
from teraplay.infrastructure.strategies.relay_hint import RelayHint
from teraplay.infrastructure.strategies.third_party import ThirdPartyRelayStrategy

__all__ = [
    "DirectUrlStrategy",
    "HtmlScrapeStrategy",
    "MirroredApiStrategy",
    "RelayHint",
    "ShortUrlInfoStrategy",
    "StrategyOrchestrator",
    "ThirdPartyRelayStrategy",
    "build_orchestrator",
    "build_strategy_chains",
]
