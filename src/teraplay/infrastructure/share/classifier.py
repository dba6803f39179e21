"""Decides whether an input string is a supported share link.

Acceptance is intentionally permissive: a link is accepted when its host
matches a known Terabox domain **or** when it carries a structural marker
(``/s/``, ``surl=``, ``/file/``, ``tera``).  This favours recall over
precision; some unrelated URLs are accepted and simply fail resolution.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

import structlog

from teraplay.domain.entities.share import ShareReference, SourceVariant
from teraplay.domain.exceptions import ShareLinkRejectedError
from teraplay.infrastructure.share.identifier import extract_share_identifier

log = structlog.get_logger(__name__)

_PRIMARY_HOSTS_RE = re.compile(
    r"^(?:www\.)?(?:terabox\.(?:com|app)|teraboxapp\.com)$", re.IGNORECASE
)
_1024TERA_HOSTS_RE = re.compile(r"^(?:www\.)?1024tera\.com$", re.IGNORECASE)
_MIRROR_HOSTS_RE = re.compile(
    r"^(?:www\.)?(?:"
    r"mirrobox\.com|nephobox\.com|freeterabox\.com|4funbox\.(?:com|co)"
    r"|momerybox\.com|tibibox\.com"
    r")$",
    re.IGNORECASE,
)
# Any other host mentioning terabox (regional and CDN subdomains)
_ANY_TERABOX_HOST_RE = re.compile(r"terabox", re.IGNORECASE)

_STRUCTURAL_MARKERS: tuple[str, ...] = ("/s/", "surl=", "/file/", "terabox", "tera")

_KEYWORD_FALLBACK_RE = re.compile(
    r"terabox|1024tera|mirrobox|nephobox|freeterabox|4funbox|momerybox|tibibox",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ClassificationResult:
    accepted: bool
    normalized_url: str
    variant: SourceVariant | None = None
    host_matched: bool = False
    marker_matched: bool = False


def normalize_url(raw: str) -> str:
    """Strip whitespace and prepend ``https://`` when no scheme is present."""
    url = raw.strip()
    if url and not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url


def _variant_for_host(hostname: str) -> SourceVariant | None:
    if _1024TERA_HOSTS_RE.match(hostname):
        return SourceVariant.MIRROR_1024TERA
    if _PRIMARY_HOSTS_RE.match(hostname):
        return SourceVariant.PRIMARY
    if _MIRROR_HOSTS_RE.match(hostname):
        return SourceVariant.MIRROR
    if _ANY_TERABOX_HOST_RE.search(hostname):
        return SourceVariant.PRIMARY
    return None


def _variant_for_keyword(text: str) -> SourceVariant:
    lowered = text.lower()
    if "1024tera" in lowered:
        return SourceVariant.MIRROR_1024TERA
    if "terabox" in lowered:
        return SourceVariant.PRIMARY
    return SourceVariant.MIRROR


def classify_share_url(raw: str) -> ClassificationResult:
    """Classify *raw* as a supported share link or not.

    Never raises.  Unparseable input falls back to a keyword test over the
    raw text instead of being rejected outright.
    """
    if not raw or not raw.strip():
        return ClassificationResult(accepted=False, normalized_url="")

    url = normalize_url(raw)

    try:
        parts = urlsplit(url)
        hostname = parts.hostname or ""
    except ValueError:
        accepted = bool(_KEYWORD_FALLBACK_RE.search(url))
        log.debug("classify_parse_failed", url=url[:120], accepted=accepted)
        return ClassificationResult(
            accepted=accepted,
            normalized_url=url,
            variant=_variant_for_keyword(url) if accepted else None,
        )

    host_variant = _variant_for_host(hostname)
    lowered = url.lower()
    marker_matched = any(marker in lowered for marker in _STRUCTURAL_MARKERS)

    accepted = host_variant is not None or marker_matched
    variant: SourceVariant | None = None
    if host_variant is not None:
        variant = host_variant
    elif accepted:
        variant = SourceVariant.PRIMARY

    log.debug(
        "classify_share_url",
        url=url[:120],
        hostname=hostname,
        host_matched=host_variant is not None,
        marker_matched=marker_matched,
        accepted=accepted,
    )
    return ClassificationResult(
        accepted=accepted,
        normalized_url=url,
        variant=variant,
        host_matched=host_variant is not None,
        marker_matched=marker_matched,
    )


def is_supported_share_url(raw: str) -> bool:
    return classify_share_url(raw).accepted


def build_share_reference(raw: str) -> ShareReference:
    """Classify *raw* and extract its identifier.

    Raises ``ShareLinkRejectedError`` when the classifier declines it.
    """
    result = classify_share_url(raw)
    if not result.accepted or result.variant is None:
        raise ShareLinkRejectedError(raw)
    return ShareReference(
        raw_url=raw,
        normalized_url=result.normalized_url,
        variant=result.variant,
        identifier=extract_share_identifier(result.normalized_url),
    )
