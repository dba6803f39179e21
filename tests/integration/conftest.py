"""Shared fixtures for integration tests.

These tests wire the real strategy chain (relays, verifier, orchestrator)
against mocked HTTP via respx.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path

import httpx
import pytest
import respx

from teraplay.infrastructure.config.schema import (
    DownloaderApi,
    RelayEndpoint,
    ResolverConfig,
)

CORS_RELAY = "https://relay.test/"
PAGE_RELAY = "https://pages.test/raw?url="
DOWNLOADER = "https://dl.test/api/teraboxdl"


@pytest.fixture()
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def respx_mock() -> Iterator[respx.MockRouter]:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture()
def resolver_config() -> ResolverConfig:
    """Resolver config pointing every endpoint family at a mocked host."""
    return ResolverConfig(
        cors_relay_prefix=CORS_RELAY,
        raw_relays=[RelayEndpoint(name="pages", prefix=PAGE_RELAY)],
        downloader_apis=[DownloaderApi(name="dl", endpoint=DOWNLOADER, method="POST")],
        direct_url_templates=[
            "https://d.terabox.com/file/d/{identifier}",
            "https://d.terabox.com/file/d/{surl}",
        ],
        strategy_timeout_seconds=5.0,
    )


@pytest.fixture()
def share_page(fixtures_dir: Path) -> str:
    return (fixtures_dir / "terabox_share_page.html").read_text(encoding="utf-8")
