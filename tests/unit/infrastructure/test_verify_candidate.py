"""Tests for the shared candidate verifier."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from teraplay.infrastructure.strategies._verify import (
    is_media_content_type,
    verify_candidate,
)

_URL = "https://d.terabox.com/file/video.mp4"


def _client(status: int, headers: dict[str, str] | None = None) -> AsyncMock:
    head_resp = MagicMock()
    head_resp.status_code = status
    head_resp.headers = headers or {}

    client = AsyncMock(spec=httpx.AsyncClient)
    client.head = AsyncMock(return_value=head_resp)
    return client


class TestIsMediaContentType:
    @pytest.mark.parametrize(
        "content_type",
        [
            "video/mp4",
            "video/x-matroska",
            "application/octet-stream",
            "binary/octet-stream",
            "application/vnd.apple.mpegurl; charset=utf-8",
            "application/x-mpegURL",
            "application/dash+xml",
        ],
    )
    def test_media(self, content_type: str) -> None:
        assert is_media_content_type(content_type) is True

    @pytest.mark.parametrize(
        "content_type", ["text/html; charset=utf-8", "application/json", "image/jpeg"]
    )
    def test_not_media(self, content_type: str) -> None:
        assert is_media_content_type(content_type) is False


class TestVerifyCandidate:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("status", [200, 206])
    async def test_accepts_video(self, status: int) -> None:
        client = _client(status, {"content-type": "video/mp4", "content-length": "1234"})

        result = await verify_candidate(client, _URL)

        assert result is not None
        assert result.url == _URL
        assert result.status_code == status
        assert result.content_length == 1234
        assert result.content_type == "video/mp4"

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("status", [403, 404, 500])
    async def test_rejects_error_status(self, status: int) -> None:
        client = _client(status, {"content-type": "video/mp4"})
        assert await verify_candidate(client, _URL) is None

    @pytest.mark.asyncio()
    async def test_rejects_html(self) -> None:
        client = _client(200, {"content-type": "text/html; charset=utf-8"})
        assert await verify_candidate(client, _URL) is None

    @pytest.mark.asyncio()
    async def test_html_allowed_when_not_enforced(self) -> None:
        client = _client(200, {"content-type": "text/html"})
        result = await verify_candidate(client, _URL, enforce_content_type=False)
        assert result is not None

    @pytest.mark.asyncio()
    async def test_missing_content_type_is_accepted(self) -> None:
        client = _client(200)
        result = await verify_candidate(client, _URL)
        assert result is not None
        assert result.content_length == 0

    @pytest.mark.asyncio()
    async def test_bad_content_length_reads_as_zero(self) -> None:
        client = _client(200, {"content-type": "video/mp4", "content-length": "n/a"})
        result = await verify_candidate(client, _URL)
        assert result is not None
        assert result.content_length == 0

    @pytest.mark.asyncio()
    async def test_network_error_returns_none(self) -> None:
        client = AsyncMock(spec=httpx.AsyncClient)
        client.head = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        assert await verify_candidate(client, _URL) is None

    @pytest.mark.asyncio()
    async def test_head_request_options(self) -> None:
        client = _client(200, {"content-type": "video/mp4"})
        headers = {"Referer": "https://www.terabox.com/"}

        await verify_candidate(client, _URL, headers=headers, timeout=3.0)

        client.head.assert_awaited_once()
        args, kwargs = client.head.call_args
        assert args == (_URL,)
        assert kwargs["headers"] == headers
        assert kwargs["follow_redirects"] is True
        assert kwargs["timeout"] == 3.0
