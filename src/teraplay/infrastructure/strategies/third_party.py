"""Third-party relay strategy: public downloader services.

Each configured ``DownloaderApi`` receives the share link and answers in
its own shape; ``extract_file_record`` normalises them.  These services
are not operated by the source site, so every locator they return is
HEAD-verified before use.
"""

from __future__ import annotations

from collections.abc import Sequence
from urllib.parse import quote

import httpx
import structlog

from teraplay.domain.entities.share import (
    DEFAULT_TITLE,
    FailureKind,
    ResolvedDescriptor,
    ShareReference,
    StrategyFailure,
)
from teraplay.infrastructure.common.extractors import extract_file_record
from teraplay.infrastructure.config.schema import DownloaderApi
from teraplay.infrastructure.strategies._verify import verify_candidate
from teraplay.infrastructure.strategies.relay_hint import RelayHint

log = structlog.get_logger(__name__)


class ThirdPartyRelayStrategy:
    """Submits the share link to independent downloader APIs in turn."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        apis: Sequence[DownloaderApi],
        *,
        relay_hint: RelayHint | None = None,
        timeout: float = 15.0,
        verify_timeout: float = 8.0,
        enforce_content_type: bool = True,
    ) -> None:
        self._http = http_client
        self._apis = tuple(apis)
        self._hint = relay_hint
        self._timeout = timeout
        self._verify_timeout = verify_timeout
        self._enforce_content_type = enforce_content_type

    @property
    def name(self) -> str:
        return "third_party"

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

    async def _request(self, api: DownloaderApi, share_url: str) -> httpx.Response:
        if api.method == "GET":
            endpoint = api.endpoint.replace("{url}", quote(share_url, safe=""))
            return await self._http.get(endpoint, timeout=self._timeout)
        return await self._http.post(
            api.endpoint,
            json={"url": share_url},
            timeout=self._timeout,
        )

    async def _try_api(
        self, api: DownloaderApi, share: ShareReference
    ) -> ResolvedDescriptor | StrategyFailure:
        endpoint = api.endpoint
        try:
            resp = await self._request(api, share.normalized_url)
        except httpx.TimeoutException:
            log.warning("third_party_timeout", api=api.name)
            return self._failure(FailureKind.NETWORK_FAILURE, f"{api.name}: timeout", endpoint)
        except httpx.HTTPError as exc:
            log.warning("third_party_request_failed", api=api.name, error=str(exc))
            return self._failure(
                FailureKind.NETWORK_FAILURE, f"{api.name}: {str(exc) or 'http error'}", endpoint
            )

        if resp.status_code != 200:
            log.warning("third_party_http_error", api=api.name, status=resp.status_code)
            return self._failure(
                FailureKind.UPSTREAM_REJECTED,
                f"{api.name}: HTTP error! status: {resp.status_code}",
                endpoint,
                resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError:
            log.warning("third_party_invalid_json", api=api.name)
            return self._failure(
                FailureKind.SHAPE_MISMATCH, f"{api.name}: invalid json", endpoint, 200
            )

        record = extract_file_record(data)
        if record is None:
            log.warning("third_party_no_link", api=api.name)
            return self._failure(
                FailureKind.SHAPE_MISMATCH, f"{api.name}: no download link", endpoint, 200
            )

        verified = await verify_candidate(
            self._http,
            record.download_url,
            strategy=self.name,
            timeout=self._verify_timeout,
            enforce_content_type=self._enforce_content_type,
        )
        if verified is None:
            return self._failure(
                FailureKind.VERIFICATION_FAILED,
                f"{api.name}: link failed verification",
                record.download_url,
            )

        return ResolvedDescriptor(
            url=verified.url,
            title=record.title or DEFAULT_TITLE,
            size=record.size or verified.content_length,
            thumbnail=record.thumbnail,
            strategy=self.name,
        )

    async def attempt(self, share: ShareReference) -> ResolvedDescriptor | StrategyFailure:
        if not self._apis:
            return self._failure(FailureKind.NETWORK_FAILURE, "no downloader apis configured")

        apis = (
            self._hint.order(self._apis, key=lambda a: a.name)
            if self._hint is not None
            else list(self._apis)
        )

        last_failure: StrategyFailure | None = None
        for api in apis:
            outcome = await self._try_api(api, share)
            if isinstance(outcome, ResolvedDescriptor):
                if self._hint is not None:
                    self._hint.remember(api.name)
                log.info("third_party_resolved", api=api.name)
                return outcome
            last_failure = outcome

        failure = last_failure or self._failure(
            FailureKind.NETWORK_FAILURE, "no downloader api answered"
        )
        log.warning("third_party_failed", kind=failure.kind.value, reason=failure.reason)
        return failure
