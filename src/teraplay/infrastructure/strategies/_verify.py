"""Shared HEAD-check verification for candidate media URLs."""

from __future__ import annotations

import httpx
import structlog

from teraplay.domain.entities.share import VerifiedCandidate

log = structlog.get_logger(__name__)

_ACCEPTED_STATUS: frozenset[int] = frozenset({200, 206})

_MEDIA_CONTENT_TYPES: tuple[str, ...] = (
    "application/octet-stream",
    "binary/octet-stream",
    "application/vnd.apple.mpegurl",
    "application/x-mpegurl",
    "application/dash+xml",
)


def is_media_content_type(content_type: str) -> bool:
    """Return *True* for ``video/*`` and binary/streaming manifest types."""
    ct = content_type.split(";", 1)[0].strip().lower()
    return ct.startswith("video/") or ct in _MEDIA_CONTENT_TYPES


def _content_length(headers: httpx.Headers | dict[str, str]) -> int:
    raw = headers.get("content-length") or ""
    try:
        return max(int(raw), 0)
    except ValueError:
        return 0


async def verify_candidate(
    http_client: httpx.AsyncClient,
    url: str,
    *,
    strategy: str = "verify",
    headers: dict[str, str] | None = None,
    timeout: float = 8.0,
    enforce_content_type: bool = True,
) -> VerifiedCandidate | None:
    """HEAD-check a candidate URL and classify it as media or not.

    Accepts 200 and 206 (partial content, common for byte-range
    servers).  When a ``content-type`` header is present and
    *enforce_content_type* is set it must denote a media type; a missing
    header is not disqualifying since relays often strip it.

    Never transfers the body and never raises: network errors,
    unexpected statuses and disqualifying content types all return
    ``None``.
    """
    try:
        resp = await http_client.head(
            url,
            headers=headers or {},
            follow_redirects=True,
            timeout=timeout,
        )
    except httpx.HTTPError as exc:
        log.warning(
            "verify_request_error",
            strategy=strategy,
            url=url[:120],
            error=str(exc),
        )
        return None

    if resp.status_code not in _ACCEPTED_STATUS:
        log.warning(
            "verify_head_failed",
            strategy=strategy,
            status=resp.status_code,
            url=url[:120],
        )
        return None

    content_type = resp.headers.get("content-type", "")
    if content_type and enforce_content_type and not is_media_content_type(
        content_type
    ):
        log.warning(
            "verify_not_media",
            strategy=strategy,
            content_type=content_type,
            url=url[:120],
        )
        return None

    log.debug(
        "verify_ok",
        strategy=strategy,
        status=resp.status_code,
        content_type=content_type,
        url=url[:120],
    )
    return VerifiedCandidate(
        url=url,
        status_code=resp.status_code,
        content_length=_content_length(resp.headers),
        content_type=content_type,
    )
