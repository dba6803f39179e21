"""HTML-scrape strategy: fetch the share page through raw relays.

The page is fetched via each configured relay (last working relay
first) and its inline scripts are scanned with the named rules in
``scrape_rules``.  JSON-blob matches are trusted; bare URL matches are
HEAD-verified first.
"""

from __future__ import annotations

from collections.abc import Sequence

import httpx
import structlog

from teraplay.domain.entities.share import (
    DEFAULT_TITLE,
    FailureKind,
    ResolvedDescriptor,
    ShareReference,
    StrategyFailure,
)
from teraplay.infrastructure.config.schema import RelayEndpoint
from teraplay.infrastructure.strategies._verify import verify_candidate
from teraplay.infrastructure.strategies.relay_hint import RelayHint
from teraplay.infrastructure.strategies.scrape_rules import iter_scrape_matches

log = structlog.get_logger(__name__)

_BROWSER_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.5",
}


class HtmlScrapeStrategy:
    """Scrapes the share page HTML for an embedded download link."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        relays: Sequence[RelayEndpoint],
        *,
        relay_hint: RelayHint | None = None,
        timeout: float = 15.0,
        verify_timeout: float = 8.0,
        enforce_content_type: bool = True,
    ) -> None:
        self._http = http_client
        self._relays = tuple(relays)
        self._hint = relay_hint
        self._timeout = timeout
        self._verify_timeout = verify_timeout
        self._enforce_content_type = enforce_content_type

    @property
    def name(self) -> str:
        return "html_scrape"

    def _failure(
        self,
        kind: FailureKind,
        reason: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ) -> StrategyFailure:
        return StrategyFailure(
            strategy=self.name,
            kind=kind,
            reason=reason,
            endpoint=endpoint,
            status_code=status_code,
        )

    async def _fetch_page(
        self, relay: RelayEndpoint, share: ShareReference
    ) -> str | StrategyFailure:
        endpoint = relay.wrap(share.normalized_url)
        try:
            resp = await self._http.get(
                endpoint,
                headers=_BROWSER_HEADERS,
                follow_redirects=True,
                timeout=self._timeout,
            )
        except httpx.TimeoutException:
            log.warning("html_scrape_relay_timeout", relay=relay.name)
            return self._failure(FailureKind.NETWORK_FAILURE, "timeout", endpoint)
        except httpx.HTTPError as exc:
            log.warning("html_scrape_relay_error", relay=relay.name, error=str(exc))
            return self._failure(
                FailureKind.NETWORK_FAILURE, str(exc) or "http error", endpoint
            )

        if resp.status_code != 200:
            log.warning(
                "html_scrape_relay_http_error",
                relay=relay.name,
                status=resp.status_code,
            )
            return self._failure(
                FailureKind.UPSTREAM_REJECTED,
                f"HTTP error! status: {resp.status_code}",
                endpoint,
                resp.status_code,
            )
        return resp.text

    async def _extract(
        self, html: str, endpoint: str
    ) -> ResolvedDescriptor | StrategyFailure:
        unverified: list[str] = []
        for match in iter_scrape_matches(html):
            if match.authoritative:
                return ResolvedDescriptor(
                    url=match.url,
                    title=match.title or DEFAULT_TITLE,
                    size=match.size,
                    thumbnail=match.thumbnail,
                    strategy=self.name,
                )
            verified = await verify_candidate(
                self._http,
                match.url,
                strategy=self.name,
                timeout=self._verify_timeout,
                enforce_content_type=self._enforce_content_type,
            )
            if verified is not None:
                return ResolvedDescriptor(
                    url=verified.url,
                    size=verified.content_length,
                    strategy=self.name,
                )
            unverified.append(match.rule)

        if unverified:
            return self._failure(
                FailureKind.VERIFICATION_FAILED,
                f"scraped links failed verification ({', '.join(unverified)})",
                endpoint,
            )
        return self._failure(
            FailureKind.SHAPE_MISMATCH,
            "Could not extract video URL from page",
            endpoint,
            200,
        )

    async def attempt(self, share: ShareReference) -> ResolvedDescriptor | StrategyFailure:
        if not self._relays:
            return self._failure(FailureKind.NETWORK_FAILURE, "no relays configured")

        relays = (
            self._hint.order(self._relays, key=lambda r: r.name)
            if self._hint is not None
            else list(self._relays)
        )

        last_failure: StrategyFailure | None = None
        for relay in relays:
            page = await self._fetch_page(relay, share)
            if isinstance(page, StrategyFailure):
                last_failure = page
                continue

            outcome = await self._extract(page, relay.wrap(share.normalized_url))
            if isinstance(outcome, ResolvedDescriptor):
                if self._hint is not None:
                    self._hint.remember(relay.name)
                log.info("html_scrape_resolved", relay=relay.name)
                return outcome
            last_failure = outcome

        failure = last_failure or self._failure(
            FailureKind.NETWORK_FAILURE, "no relay answered"
        )
        log.warning("html_scrape_failed", kind=failure.kind.value, reason=failure.reason)
        return failure
