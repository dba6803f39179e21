"""Mirrored-API strategies: query Terabox's own info endpoints via a relay.

Two shapes exist:

``MirroredApiStrategy`` (all variants)
    POST {relay}https://www.terabox.com/api/url/info  {"url": share_url}
    → {"errno": 0, "dlink": "...", "server_filename": "...", "size": 123,
       "thumbs": {"url4": "..."}}

``ShortUrlInfoStrategy`` (1024tera mirror)
    GET {relay}https://www.1024tera.com/api/shorturlinfo?shorturl={id}&root=1
    → {"errno": 0, "list": [{"dlink": "...", "server_filename": "...", ...}]}

Both responses name an explicit download field, so their locators are
returned without a verifier round-trip.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any
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

log = structlog.get_logger(__name__)

_API_BASE = "https://www.terabox.com"
_1024TERA_API_BASE = "https://www.1024tera.com"


def _api_status_ok(data: dict[str, Any]) -> bool:
    """Terabox APIs report success as ``errno == 0`` or ``status == "ok"``."""
    if "errno" in data:
        return data.get("errno") == 0
    return data.get("status") == "ok"


class _RelayedApiStrategy(ABC):
    """Shared response handling for relayed Terabox API calls."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        relay_prefix: str,
        api_base: str,
        timeout: float = 15.0,
        name: str,
    ) -> None:
        self._http = http_client
        self._relay_prefix = relay_prefix
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def _fail(
        self,
        kind: FailureKind,
        reason: str,
        endpoint: str,
        status_code: int | None = None,
    ) -> StrategyFailure:
        log.warning(
            f"{self._name}_failed",
            kind=kind.value,
            reason=reason,
            status=status_code,
            endpoint=endpoint[:120],
        )
        return StrategyFailure(
            strategy=self._name,
            kind=kind,
            reason=reason,
            endpoint=endpoint,
            status_code=status_code,
        )

    @abstractmethod
    async def _send(self, endpoint: str, share: ShareReference) -> httpx.Response:
        """Issue the relayed request for *share* against *endpoint*."""

    async def _call(
        self, endpoint: str, share: ShareReference
    ) -> ResolvedDescriptor | StrategyFailure:
        try:
            resp = await self._send(endpoint, share)
        except httpx.TimeoutException:
            return self._fail(FailureKind.NETWORK_FAILURE, "timeout", endpoint)
        except httpx.HTTPError as exc:
            return self._fail(FailureKind.NETWORK_FAILURE, str(exc) or "http error", endpoint)

        if resp.status_code != 200:
            return self._fail(
                FailureKind.UPSTREAM_REJECTED,
                f"HTTP error! status: {resp.status_code}",
                endpoint,
                resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError:
            return self._fail(FailureKind.SHAPE_MISMATCH, "invalid json", endpoint, 200)

        if not isinstance(data, dict):
            return self._fail(FailureKind.SHAPE_MISMATCH, "unexpected json root", endpoint, 200)

        if not _api_status_ok(data):
            return self._fail(
                FailureKind.UPSTREAM_REJECTED,
                f"Failed to get video information (errno={data.get('errno', data.get('status'))})",
                endpoint,
                200,
            )

        record = extract_file_record(data)
        if record is None:
            return self._fail(FailureKind.SHAPE_MISMATCH, "no download link", endpoint, 200)

        log.debug(f"{self._name}_resolved", title=record.title, size=record.size)
        return ResolvedDescriptor(
            url=record.download_url,
            title=record.title or DEFAULT_TITLE,
            size=record.size,
            thumbnail=record.thumbnail,
            strategy=self._name,
        )


class MirroredApiStrategy(_RelayedApiStrategy):
    """POSTs the share URL to the relayed ``/api/url/info`` endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        relay_prefix: str,
        api_base: str = _API_BASE,
        timeout: float = 15.0,
        name: str = "mirrored_api",
    ) -> None:
        super().__init__(
            http_client,
            relay_prefix=relay_prefix,
            api_base=api_base,
            timeout=timeout,
            name=name,
        )

    async def _send(self, endpoint: str, share: ShareReference) -> httpx.Response:
        return await self._http.post(
            endpoint,
            json={"url": share.normalized_url},
            headers={"Content-Type": "application/json"},
            timeout=self._timeout,
        )

    async def attempt(self, share: ShareReference) -> ResolvedDescriptor | StrategyFailure:
        endpoint = f"{self._relay_prefix}{self._api_base}/api/url/info"
        return await self._call(endpoint, share)


class ShortUrlInfoStrategy(_RelayedApiStrategy):
    """Queries the 1024tera ``/api/shorturlinfo`` endpoint by identifier."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        relay_prefix: str,
        api_base: str = _1024TERA_API_BASE,
        timeout: float = 15.0,
        name: str = "shorturl_info",
    ) -> None:
        super().__init__(
            http_client,
            relay_prefix=relay_prefix,
            api_base=api_base,
            timeout=timeout,
            name=name,
        )

    async def _send(self, endpoint: str, share: ShareReference) -> httpx.Response:
        return await self._http.get(endpoint, timeout=self._timeout)

    async def attempt(self, share: ShareReference) -> ResolvedDescriptor | StrategyFailure:
        if not share.identifier:
            return self._fail(
                FailureKind.IDENTIFIER_MISSING,
                "Could not extract file ID from URL",
                share.normalized_url,
            )
        endpoint = (
            f"{self._relay_prefix}{self._api_base}/api/shorturlinfo"
            f"?shorturl={quote(share.identifier, safe='')}&root=1"
        )
        return await self._call(endpoint, share)
