"""Per-variant strategy chains built from ``ResolverConfig``."""

from __future__ import annotations

import httpx
import structlog

from teraplay.domain.entities.share import SourceVariant
from teraplay.domain.ports.strategy import ResolutionStrategyPort
from teraplay.infrastructure.config.schema import ResolverConfig
from teraplay.infrastructure.strategies.direct_url import DirectUrlStrategy
from teraplay.infrastructure.strategies.html_scrape import HtmlScrapeStrategy
from teraplay.infrastructure.strategies.mirrored_api import (
    MirroredApiStrategy,
    ShortUrlInfoStrategy,
)
from teraplay.infrastructure.strategies.orchestrator import StrategyOrchestrator
from teraplay.infrastructure.strategies.relay_hint import RelayHint
from teraplay.infrastructure.strategies.third_party import ThirdPartyRelayStrategy

log = structlog.get_logger(__name__)


def build_strategy_chains(
    http_client: httpx.AsyncClient,
    config: ResolverConfig,
    *,
    http_timeout: float = 15.0,
    verify_timeout: float = 8.0,
    html_hint: RelayHint | None = None,
    api_hint: RelayHint | None = None,
) -> dict[SourceVariant, list[ResolutionStrategyPort]]:
    """Return the ordered strategy list for every known variant.

    Primary and generic mirrors: mirrored API, HTML scrape, direct URL,
    third-party relays.  The 1024tera mirror tries its short-url info
    endpoint before the same list.
    """
    mirrored_api = MirroredApiStrategy(
        http_client,
        relay_prefix=config.cors_relay_prefix,
        timeout=http_timeout,
    )
    html_scrape = HtmlScrapeStrategy(
        http_client,
        config.raw_relays,
        relay_hint=html_hint,
        timeout=http_timeout,
        verify_timeout=verify_timeout,
        enforce_content_type=config.enforce_content_type,
    )
    direct_url = DirectUrlStrategy(
        http_client,
        config.direct_url_templates,
        share_page_template=config.share_page_template,
        allow_external_fallback=config.allow_external_fallback,
        verify_timeout=verify_timeout,
        enforce_content_type=config.enforce_content_type,
    )
    third_party = ThirdPartyRelayStrategy(
        http_client,
        config.downloader_apis,
        relay_hint=api_hint,
        timeout=http_timeout,
        verify_timeout=verify_timeout,
        enforce_content_type=config.enforce_content_type,
    )
    shorturl_info = ShortUrlInfoStrategy(
        http_client,
        relay_prefix=config.cors_relay_prefix,
        timeout=http_timeout,
    )

    common: list[ResolutionStrategyPort] = [
        mirrored_api,
        html_scrape,
        direct_url,
        third_party,
    ]
    return {
        SourceVariant.PRIMARY: list(common),
        SourceVariant.MIRROR_1024TERA: [shorturl_info, *common],
        SourceVariant.MIRROR: list(common),
    }


def build_orchestrator(
    http_client: httpx.AsyncClient,
    config: ResolverConfig,
    *,
    http_timeout: float = 15.0,
    verify_timeout: float = 8.0,
    html_hint: RelayHint | None = None,
    api_hint: RelayHint | None = None,
) -> StrategyOrchestrator:
    """Wire a ``StrategyOrchestrator`` with the default chains."""
    chains = build_strategy_chains(
        http_client,
        config,
        http_timeout=http_timeout,
        verify_timeout=verify_timeout,
        html_hint=html_hint,
        api_hint=api_hint,
    )
    orchestrator = StrategyOrchestrator(
        chains,
        default_chain=chains[SourceVariant.PRIMARY],
        strategy_timeout=config.strategy_timeout_seconds,
    )
    log.info(
        "strategy_orchestrator_initialized",
        variants=[v.value for v in orchestrator.supported_variants],
        relays=[r.name for r in config.raw_relays],
        downloader_apis=[a.name for a in config.downloader_apis],
    )
    return orchestrator
