"""Constructed-direct-URL strategy.

Builds canonical download URLs from the share identifier alone and
HEAD-verifies each in order; the share page itself is never fetched.
"""

from __future__ import annotations

from collections.abc import Sequence

import httpx
import structlog

from teraplay.domain.entities.share import (
    FailureKind,
    ResolvedDescriptor,
    ShareReference,
    StrategyFailure,
)
from teraplay.infrastructure.share.identifier import share_surl
from teraplay.infrastructure.strategies._verify import verify_candidate

log = structlog.get_logger(__name__)


def build_candidate_urls(identifier: str, templates: Sequence[str]) -> list[str]:
    """Fill ``{identifier}`` / ``{surl}`` placeholders, dropping duplicates."""
    values = {"identifier": identifier, "surl": share_surl(identifier)}
    urls: list[str] = []
    for template in templates:
        url = template.format(**values)
        if url not in urls:
            urls.append(url)
    return urls


class DirectUrlStrategy:
    """Probes constructed download URLs with the candidate verifier.

    With *allow_external_fallback* the share page (filled from
    *share_page_template*) is returned as an external link when no
    constructed URL verifies.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        templates: Sequence[str],
        *,
        share_page_template: str | None = None,
        allow_external_fallback: bool = False,
        verify_timeout: float = 8.0,
        enforce_content_type: bool = True,
    ) -> None:
        self._http = http_client
        self._templates = tuple(templates)
        self._share_page_template = share_page_template
        self._allow_external = allow_external_fallback
        self._verify_timeout = verify_timeout
        self._enforce_content_type = enforce_content_type

    @property
    def name(self) -> str:
        return "direct_url"

    async def attempt(self, share: ShareReference) -> ResolvedDescriptor | StrategyFailure:
        if not share.identifier:
            log.warning("direct_url_no_identifier", url=share.normalized_url[:120])
            return StrategyFailure(
                strategy=self.name,
                kind=FailureKind.IDENTIFIER_MISSING,
                reason="Could not extract file ID from URL",
                endpoint=share.normalized_url,
            )

        candidates = build_candidate_urls(share.identifier, self._templates)
        for url in candidates:
            verified = await verify_candidate(
                self._http,
                url,
                strategy=self.name,
                timeout=self._verify_timeout,
                enforce_content_type=self._enforce_content_type,
            )
            if verified is not None:
                log.info("direct_url_resolved", url=url[:120])
                return ResolvedDescriptor(
                    url=verified.url,
                    size=verified.content_length,
                    strategy=self.name,
                )

        if self._allow_external and self._share_page_template:
            page = self._share_page_template.format(
                identifier=share.identifier, surl=share_surl(share.identifier)
            )
            log.info("direct_url_external_fallback", url=page[:120])
            return ResolvedDescriptor(url=page, is_external=True, strategy=self.name)

        return StrategyFailure(
            strategy=self.name,
            kind=FailureKind.VERIFICATION_FAILED,
            reason="Direct URL method failed",
            endpoint=candidates[-1] if candidates else None,
        )
